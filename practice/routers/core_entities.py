# File: /practice/routers/core_entities.py | Version: 2.0 | Path: /practice/routers/core_entities.py
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from practice.crud import core_entities as crud_core
from practice.crud import project_cache
from practice.db.session import get_db
from practice.routers.auth_dependencies import get_manager, get_me
from practice.schemas import core_entities as schema

router = APIRouter(prefix="/api", tags=["Core Entities"])


class ListingParams:
    """Query parameters shared by the live and the cached projects listing."""

    def __init__(
        self,
        view_key: str = Query(default="default"),
        show_archived: bool = Query(default=False),
        show_completed_regardless: bool = Query(default=True),
        due_date: Optional[str] = Query(default=None, description="YYYY-MM-DD"),
    ):
        self.view_key = view_key
        self.show_archived = show_archived
        self.show_completed_regardless = show_completed_regardless
        self.due_date = due_date or None

    @property
    def cache_key(self) -> str:
        return project_cache.cache_key(
            self.view_key, self.show_archived, self.show_completed_regardless, self.due_date
        )


# ----- PROJECT ROUTES -----


@router.get("/projects", response_model=List[schema.ProjectOut])
def list_projects(
    params: ListingParams = Depends(),
    db: Session = Depends(get_db),
    current_user=Depends(get_me),
):
    try:
        rows = crud_core.list_projects(
            db,
            show_archived=params.show_archived,
            show_completed_regardless=params.show_completed_regardless,
            due_date=params.due_date,
        )
    except ValueError:
        raise HTTPException(status_code=400, detail="due_date must be YYYY-MM-DD")

    projects = [schema.ProjectOut.model_validate(r) for r in rows]
    # Every live listing becomes the user's next cached placeholder
    project_cache.store_snapshot(
        db,
        str(current_user.id),
        params.cache_key,
        [p.model_dump(mode="json") for p in projects],
        crud_core.stage_stats(rows),
    )
    return projects


@router.get("/projects/cached", response_model=schema.CachedProjectsOut)
def cached_projects(
    params: ListingParams = Depends(),
    db: Session = Depends(get_db),
    current_user=Depends(get_me),
):
    return project_cache.read_cached(db, str(current_user.id), params.cache_key)


# ----- REFERENCE DATA ROUTES -----


@router.get("/services/active", response_model=List[schema.ServiceOut])
def active_services(db: Session = Depends(get_db), current_user=Depends(get_me)):
    return crud_core.get_active_services(db)


@router.get("/services/{service_id}/due-dates", response_model=schema.ServiceDueDatesOut)
def service_due_dates(service_id: str, db: Session = Depends(get_db), current_user=Depends(get_me)):
    if crud_core.get_service(db, service_id) is None:
        raise HTTPException(status_code=404, detail="Service not found")
    return schema.ServiceDueDatesOut(service_id=service_id, due_dates=crud_core.get_service_due_dates(db, service_id))


@router.get("/clients", response_model=List[schema.ClientOut])
def clients(db: Session = Depends(get_db), current_user=Depends(get_me)):
    return crud_core.get_clients(db)


@router.get("/project-types", response_model=List[schema.ProjectTypeRef])
def project_types(db: Session = Depends(get_db), current_user=Depends(get_me)):
    return crud_core.get_project_types(db)


@router.get("/config/stages", response_model=List[schema.StageOut])
def stages(db: Session = Depends(get_db), current_user=Depends(get_me)):
    return crud_core.get_stages(db)


@router.get("/users", response_model=List[schema.UserRef])
def users(db: Session = Depends(get_db), current_user=Depends(get_manager)):
    return crud_core.get_users(db)
