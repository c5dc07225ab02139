# File: /practice/crud/preferences.py | Version: 1.0 | Title: User Default-View & Column Preferences
from __future__ import annotations

from typing import Optional

from sqlalchemy.orm import Session

from practice.models.view import ColumnPreferences, UserProjectPreferences
from practice.schemas.view import ColumnPreferencesIn, UserProjectPreferencesIn


# ----- DEFAULT VIEW -----


def get_preferences(db: Session, user_id: str) -> Optional[UserProjectPreferences]:
    return db.query(UserProjectPreferences).filter_by(user_id=user_id).first()


def save_preferences(db: Session, user_id: str, data: UserProjectPreferencesIn) -> UserProjectPreferences:
    """Full overwrite of both fields; creates the record on first use."""
    prefs = get_preferences(db, user_id)
    if prefs is None:
        prefs = UserProjectPreferences(user_id=user_id)
        db.add(prefs)
    prefs.default_view_type = data.default_view_type.value if data.default_view_type else None
    prefs.default_view_id = data.default_view_id
    db.commit()
    db.refresh(prefs)
    return prefs


def delete_preferences(db: Session, user_id: str) -> bool:
    prefs = get_preferences(db, user_id)
    if prefs is None:
        return False
    db.delete(prefs)
    db.commit()
    return True


# ----- COLUMN LAYOUT -----


def get_column_preferences(db: Session, user_id: str, view_type: str) -> Optional[ColumnPreferences]:
    return db.query(ColumnPreferences).filter_by(user_id=user_id, view_type=view_type).first()


def upsert_column_preferences(db: Session, user_id: str, data: ColumnPreferencesIn) -> ColumnPreferences:
    prefs = get_column_preferences(db, user_id, data.view_type)
    if prefs is None:
        prefs = ColumnPreferences(user_id=user_id, view_type=data.view_type)
        db.add(prefs)
    prefs.column_order = list(data.column_order)
    prefs.visible_columns = list(data.visible_columns)
    prefs.column_widths = dict(data.column_widths)
    db.commit()
    db.refresh(prefs)
    return prefs
