"""Domain-specific exceptions — framework-independent."""


class EntityNotFoundError(Exception):
    """Raised when a requested entity does not exist."""

    def __init__(self, entity_type: str, entity_id: int | str):
        self.entity_type = entity_type
        self.entity_id = entity_id
        super().__init__(f"{entity_type} with id '{entity_id}' not found")


class DuplicateRecordError(Exception):
    """Raised when a record with an already cached identifier is inserted.

    This is a programming error: identifiers are store-assigned and unique.
    """

    def __init__(self, collection: str, identifier: str):
        self.collection = collection
        self.identifier = identifier
        super().__init__(f"{collection} record '{identifier}' is already cached")


class ValidationError(Exception):
    """Raised when caller-supplied data is malformed, before any network call."""

    def __init__(self, field: str, message: str):
        self.field = field
        self.message = message
        super().__init__(f"{field}: {message}")


class StoreError(Exception):
    """Raised by a document store adapter when a remote call fails.

    Covers transport failures (``status_code`` 0) as well as HTTP-level
    errors such as permission denial or a missing document.
    """

    def __init__(self, operation: str, status_code: int, message: str):
        self.operation = operation
        self.status_code = status_code
        self.message = message
        super().__init__(f"[{operation}] {status_code}: {message}")


class RemoteError(Exception):
    """Raised by the mutation coordinator when a remote step fails."""

    def __init__(self, operation: str, message: str):
        self.operation = operation
        self.message = message
        super().__init__(f"{operation} failed: {message}")


class UploadError(RemoteError):
    """Raised when a blob upload (or its URL resolution) fails.

    Any write depending on the upload must not be attempted.
    """

    def __init__(self, path: str, message: str):
        self.path = path
        super().__init__("upload", f"{path}: {message}")


class AuthError(Exception):
    """Raised when the authentication provider rejects a request."""

    def __init__(self, code: str, message: str):
        self.code = code
        self.message = message
        super().__init__(f"{code}: {message}")
