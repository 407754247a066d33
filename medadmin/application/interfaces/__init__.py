from .auth_provider import AuthProvider, SessionListener, Unsubscribe
from .blob_store import BlobStore
from .document_store import DocumentStore

__all__ = [
    "AuthProvider",
    "SessionListener",
    "Unsubscribe",
    "BlobStore",
    "DocumentStore",
]
