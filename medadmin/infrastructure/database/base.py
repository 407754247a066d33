"""Declarative base for the local backend's tables."""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Registry of the local document store's ORM models."""
