# File: practice/db/base_class.py | Version: 2.0 | Path: /practice/db/base_class.py
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Single, authoritative Base for all models."""
