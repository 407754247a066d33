"""Domain value objects for binary assets (product images)."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class AssetFile:
    """A file selected by the operator, not yet uploaded."""

    filename: str
    content: bytes = field(repr=False)
    content_type: str = "application/octet-stream"

    @property
    def size(self) -> int:
        return len(self.content)


@dataclass(frozen=True)
class AssetHandle:
    """Result of a completed upload — must be resolved to a URL before use."""

    path: str
    token: str | None = None
