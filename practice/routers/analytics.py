from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from practice.core.permissions import is_manager_or_admin
from practice.crud.analytics import project_analytics
from practice.db.session import get_db
from practice.routers.auth_dependencies import get_me
from practice.schemas.view import AnalyticsOut, AnalyticsRequest

router = APIRouter(prefix="/api", tags=["Analytics"])


@router.post("/analytics", response_model=AnalyticsOut, summary="Aggregate projects for a dashboard widget")
def analytics(
    body: AnalyticsRequest,
    db: Session = Depends(get_db),
    current_user=Depends(get_me),
):
    return project_analytics(
        db,
        body.filters,
        body.group_by,
        is_manager_or_admin=is_manager_or_admin(current_user),
    )
