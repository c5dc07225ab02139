from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from practice.crud import preferences as crud_prefs
from practice.db.session import get_db
from practice.routers.auth_dependencies import get_me
from practice.schemas.view import (
    ColumnPreferencesIn,
    ColumnPreferencesOut,
    UserProjectPreferencesIn,
    UserProjectPreferencesOut,
)

router = APIRouter(prefix="/api", tags=["Preferences"])


# ----- DEFAULT VIEW -----


@router.get("/user-project-preferences", response_model=Optional[UserProjectPreferencesOut])
def get_preferences(db: Session = Depends(get_db), current_user=Depends(get_me)):
    """`null` until the user has opened a view or dashboard once."""
    return crud_prefs.get_preferences(db, str(current_user.id))


@router.post("/user-project-preferences", response_model=UserProjectPreferencesOut)
def save_preferences(
    data: UserProjectPreferencesIn,
    db: Session = Depends(get_db),
    current_user=Depends(get_me),
):
    return crud_prefs.save_preferences(db, str(current_user.id), data)


@router.delete("/user-project-preferences")
def clear_preferences(db: Session = Depends(get_db), current_user=Depends(get_me)):
    crud_prefs.delete_preferences(db, str(current_user.id))
    return {"detail": "Preferences cleared"}


# ----- COLUMN LAYOUT -----


@router.get("/column-preferences", response_model=Optional[ColumnPreferencesOut])
def get_column_preferences(
    view_type: str = Query(default="projects-list"),
    db: Session = Depends(get_db),
    current_user=Depends(get_me),
):
    return crud_prefs.get_column_preferences(db, str(current_user.id), view_type)


@router.post("/column-preferences", response_model=ColumnPreferencesOut)
def save_column_preferences(
    data: ColumnPreferencesIn,
    db: Session = Depends(get_db),
    current_user=Depends(get_me),
):
    return crud_prefs.upsert_column_preferences(db, str(current_user.id), data)
