from .base import Base
from .session import create_engine_and_factory
from .models import DocumentModel

__all__ = [
    "Base",
    "create_engine_and_factory",
    "DocumentModel",
]
