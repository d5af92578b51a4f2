"""Pydantic schemas for query parameters and JSON responses."""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import List, Mapping, Optional

from pydantic import BaseModel, Field, field_validator

from .models import PressRelease, SearchFilters

LOGGER = logging.getLogger(__name__)


def _parse_date(value: Optional[str]) -> Optional[date]:
    if not value or not value.strip():
        return None
    try:
        return date.fromisoformat(value.strip())
    except ValueError:
        LOGGER.debug("Ignoring invalid date filter %r", value)
        return None


class FilterParams(BaseModel):
    q: Optional[str] = Field(None, description="Free-text search over title, summary, category and tags")
    category: Optional[str] = Field(None, description="Exact category to keep")
    date_from: Optional[date] = Field(None, description="Earliest publish date (inclusive)")
    date_to: Optional[date] = Field(None, description="Latest publish date (inclusive, whole day)")
    tag: List[str] = Field(default_factory=list, description="Tags to match, any of them")

    @field_validator("q")
    @classmethod
    def blank_query_to_none(cls, value: Optional[str]) -> Optional[str]:
        # Non-blank queries are matched verbatim, surrounding spaces included.
        if value is None or not value.strip():
            return None
        return value

    @field_validator("category")
    @classmethod
    def blank_to_none(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        cleaned = value.strip()
        return cleaned or None

    @field_validator("tag")
    @classmethod
    def clean_tags(cls, value: List[str]) -> List[str]:
        cleaned: List[str] = []
        for tag in value:
            tag = tag.strip()
            if tag and tag not in cleaned:
                cleaned.append(tag)
        return cleaned

    @classmethod
    def from_query(cls, params: Mapping[str, str], tags: List[str]) -> "FilterParams":
        """Build filters from raw page query parameters, dropping unparseable dates."""

        return cls(
            q=params.get("q"),
            category=params.get("category"),
            date_from=_parse_date(params.get("date_from")),
            date_to=_parse_date(params.get("date_to")),
            tag=tags,
        )

    def to_filters(self) -> SearchFilters:
        return SearchFilters(
            query=self.q,
            category=self.category,
            date_from=self.date_from,
            date_to=self.date_to,
            tags=list(self.tag) or None,
        )


class PressReleaseResponse(BaseModel):
    title: str
    slug: str
    publish_date: datetime
    summary: str
    category: str
    tags: List[str]
    cover_image_url: Optional[str] = None

    @classmethod
    def from_release(cls, release: PressRelease) -> "PressReleaseResponse":
        return cls(
            title=release.title,
            slug=release.slug,
            publish_date=release.publish_date,
            summary=release.summary,
            category=release.category,
            tags=list(release.tags),
            cover_image_url=release.cover_image.absolute_url if release.cover_image else None,
        )


class PressReleaseListResponse(BaseModel):
    total: int = Field(..., description="Number of releases before in-memory filtering")
    count: int = Field(..., description="Number of releases returned")
    items: List[PressReleaseResponse]


class TagsResponse(BaseModel):
    tags: List[str]


__all__ = [
    "FilterParams",
    "PressReleaseListResponse",
    "PressReleaseResponse",
    "TagsResponse",
]
