"""Core data models for the press room."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, Generic, List, Optional, TypeVar

PRESS_RELEASE_CATEGORIES = (
    "Awards",
    "Hotel Openings",
    "Partnerships",
    "Executive News",
    "Company Updates",
    "Events",
    "Sustainability",
)

PRESS_KIT_CATEGORIES = (
    "Logos",
    "Brand Guidelines",
    "Fact Sheets",
    "Images",
    "Documents",
)

T = TypeVar("T")


@dataclass(frozen=True)
class ImageAsset:
    """Remote image referenced by a press release."""

    url: str
    width: Optional[int] = None
    height: Optional[int] = None
    title: Optional[str] = None
    description: Optional[str] = None
    content_type: Optional[str] = None

    @property
    def absolute_url(self) -> str:
        return absolute_asset_url(self.url)


@dataclass(frozen=True)
class FileAsset:
    """Downloadable binary asset."""

    url: str
    title: Optional[str] = None
    file_name: Optional[str] = None
    content_type: Optional[str] = None
    size: Optional[int] = None

    @property
    def absolute_url(self) -> str:
        return absolute_asset_url(self.url)


@dataclass(frozen=True)
class PressRelease:
    """A published news entry."""

    title: str
    slug: str
    publish_date: datetime
    summary: str
    category: str
    tags: List[str] = field(default_factory=list)
    cover_image: Optional[ImageAsset] = None
    content: Dict[str, Any] = field(default_factory=dict)
    entry_id: Optional[str] = None


@dataclass(frozen=True)
class PressKitAsset:
    """A downloadable brand or media file with metadata."""

    title: str
    category: str
    file: FileAsset
    description: Optional[str] = None
    file_size: Optional[str] = None
    last_updated: Optional[datetime] = None
    entry_id: Optional[str] = None

    @property
    def size_label(self) -> Optional[str]:
        """Return the explicit size label, falling back to the file's byte size."""

        if self.file_size:
            return self.file_size
        if self.file.size is not None:
            return format_file_size(self.file.size)
        return None


@dataclass
class SearchFilters:
    """Transient search and filter state for one page view."""

    query: Optional[str] = None
    category: Optional[str] = None
    date_from: Optional[date] = None
    date_to: Optional[date] = None
    tags: Optional[List[str]] = None


class ErrorKind(str, Enum):
    CONFIGURATION = "configuration"
    NOT_FOUND = "not_found"
    UPSTREAM = "upstream"


@dataclass
class FetchResult(Generic[T]):
    """Outcome of a fetch against the content store."""

    ok: bool
    data: Optional[T] = None
    error: Optional[str] = None
    kind: Optional[ErrorKind] = None

    @classmethod
    def success(cls, data: T) -> "FetchResult[T]":
        return cls(ok=True, data=data)

    @classmethod
    def failure(cls, kind: ErrorKind, error: str) -> "FetchResult[T]":
        return cls(ok=False, error=error, kind=kind)

    @property
    def not_found(self) -> bool:
        return self.kind is ErrorKind.NOT_FOUND


def local_naive(value: datetime) -> datetime:
    """Return ``value`` as naive local time; naive values are returned unchanged."""

    if value.tzinfo is None:
        return value
    return value.astimezone().replace(tzinfo=None)


def absolute_asset_url(url: str) -> str:
    # The CDN hands out protocol-relative URLs ("//images.ctfassets.net/...").
    if url.startswith("//"):
        return f"https:{url}"
    return url


def format_file_size(size: int) -> str:
    if size < 1024:
        return f"{size} B"
    value = size / 1024
    for unit in ("KB", "MB"):
        if value < 1024:
            return f"{value:.1f} {unit}"
        value /= 1024
    return f"{value:.1f} GB"


__all__ = [
    "ErrorKind",
    "FetchResult",
    "FileAsset",
    "ImageAsset",
    "PRESS_KIT_CATEGORIES",
    "PRESS_RELEASE_CATEGORIES",
    "PressKitAsset",
    "PressRelease",
    "SearchFilters",
    "absolute_asset_url",
    "format_file_size",
    "local_naive",
]
