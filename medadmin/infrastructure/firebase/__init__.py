"""Firebase REST infrastructure package."""

from .firestore_document_store import FirestoreDocumentStore
from .firebase_blob_store import FirebaseBlobStore

__all__ = ["FirestoreDocumentStore", "FirebaseBlobStore"]
