# File: /practice/schemas/_base.py | Version: 2.0 | Title: Pydantic Base Schema (V2)
from pydantic import BaseModel, ConfigDict


class BaseSchema(BaseModel):
    """ORM-readable schema base shared by API response models."""

    model_config = ConfigDict(from_attributes=True)
