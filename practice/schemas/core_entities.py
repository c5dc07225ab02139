# File: /practice/schemas/core_entities.py | Version: 3.0
from __future__ import annotations

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from practice.schemas._base import BaseSchema


# -------------------- Reference data --------------------

class UserRef(BaseSchema):
    id: str
    email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None

    @property
    def display_name(self) -> str:
        full = " ".join(p for p in (self.first_name, self.last_name) if p)
        return full or self.email


class ServiceOut(BaseSchema):
    id: str
    name: str


class ClientRef(BaseSchema):
    id: str
    name: str
    # Project types this client has at least one project of
    project_type_ids: List[str] = Field(default_factory=list)


class ClientOut(BaseSchema):
    id: str
    name: str


class ProjectTypeRef(BaseSchema):
    id: str
    name: str
    service_id: Optional[str] = None


class StageOut(BaseSchema):
    id: str
    project_type_id: str
    name: str
    sort_order: int = 0
    max_instance_time: Optional[int] = None


class ServiceDueDatesOut(BaseModel):
    service_id: str
    due_dates: List[str]


# -------------------- Projects --------------------

class ProjectOut(BaseSchema):
    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: str
    client_id: str
    project_type_id: str
    description: Optional[str] = None
    current_status: str
    stage_entered_at: Optional[datetime] = None
    current_assignee_id: Optional[str] = None
    project_owner_id: Optional[str] = None
    due_date: Optional[datetime] = None
    target_date: Optional[datetime] = None
    archived: bool = False
    is_completed: bool = False
    created_at: Optional[datetime] = None

    client: Optional[ClientRef] = None
    project_type: Optional[ProjectTypeRef] = None
    current_assignee: Optional[UserRef] = None
    project_owner: Optional[UserRef] = None

    @property
    def service_id(self) -> Optional[str]:
        return self.project_type.service_id if self.project_type else None


class CachedProjectsOut(BaseModel):
    projects: Optional[List[ProjectOut]] = None
    stage_stats: Optional[Dict[str, int]] = None
    from_cache: bool = False
    cached_at: Optional[datetime] = None
    is_stale: bool = False
    stale_at: Optional[datetime] = None
