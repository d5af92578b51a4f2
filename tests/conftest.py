"""Pytest configuration and fixtures."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

import httpx
import pytest
from fastapi.testclient import TestClient

from press_room.config import ContentfulConfig, PressRoomConfig
from press_room.contentful import ContentfulClient
from press_room.models import (
    ErrorKind,
    FetchResult,
    FileAsset,
    ImageAsset,
    PressKitAsset,
    PressRelease,
)
from press_room.server import create_app


def make_release(
    slug: str,
    publish_date: datetime,
    category: str = "Company Updates",
    tags: Optional[List[str]] = None,
    title: Optional[str] = None,
    summary: str = "",
) -> PressRelease:
    return PressRelease(
        title=title or slug.replace("-", " ").title(),
        slug=slug,
        publish_date=publish_date,
        summary=summary,
        category=category,
        tags=list(tags or []),
    )


@pytest.fixture
def releases() -> List[PressRelease]:
    """Five releases in descending publish-date order, two of them awards."""

    return [
        make_release(
            "lisbon-opening",
            datetime(2024, 5, 20, 9, 0),
            category="Hotel Openings",
            tags=["Lisbon", "Design"],
            summary="A new riverside property opens its doors.",
        ),
        make_release(
            "travel-award-2024",
            datetime(2024, 4, 2, 12, 30),
            category="Awards",
            tags=["Recognition"],
            summary="Named best boutique group of the year.",
        ),
        make_release(
            "ocean-partnership",
            datetime(2024, 3, 15, 0, 0),
            category="Partnerships",
            tags=["Sustainability", "Oceans"],
            summary="Working with marine conservation charities.",
        ),
        make_release(
            "design-award",
            datetime(2024, 2, 1, 18, 45),
            category="Awards",
            tags=["Design", "Recognition"],
            summary="Interior design honours for the Porto flagship.",
        ),
        make_release(
            "new-ceo",
            datetime(2024, 1, 10, 8, 0),
            category="Executive News",
            summary="Leadership change announced.",
        ),
    ]


@pytest.fixture
def press_kit_assets() -> List[PressKitAsset]:
    return [
        PressKitAsset(
            title="Fact sheet 2024",
            category="Fact Sheets",
            file=FileAsset(url="//assets.ctfassets.net/fact.pdf", title="fact.pdf", size=2048),
        ),
        PressKitAsset(
            title="Primary logo",
            category="Logos",
            file=FileAsset(url="//assets.ctfassets.net/logo.zip", size=512),
            description="SVG and PNG versions.",
            file_size="1.2 MB",
            last_updated=datetime(2024, 3, 4),
        ),
    ]


class FakeContentClient:
    """In-memory stand-in for :class:`ContentfulClient`."""

    def __init__(
        self,
        releases: List[PressRelease],
        assets: Optional[List[PressKitAsset]] = None,
        failure: Optional[FetchResult[Any]] = None,
    ) -> None:
        self.releases = releases
        self.assets = assets or []
        self.failure = failure
        self.calls: List[str] = []

    async def list_press_releases(self, filters=None, locale=None):
        self.calls.append("list_press_releases")
        if self.failure:
            return self.failure
        return FetchResult.success(list(self.releases))

    async def get_press_release_by_slug(self, slug, locale=None):
        self.calls.append("get_press_release_by_slug")
        if self.failure:
            return self.failure
        for release in self.releases:
            if release.slug == slug:
                return FetchResult.success(release)
        return FetchResult.failure(ErrorKind.NOT_FOUND, "Press release not found.")

    async def list_related(self, slug, category, tags=None, limit=3, locale=None):
        self.calls.append("list_related")
        related = [r for r in self.releases if r.slug != slug and r.category == category]
        return FetchResult.success(related[:limit])

    async def list_press_kit_assets(self, category=None, locale=None):
        self.calls.append("list_press_kit_assets")
        if self.failure:
            return self.failure
        return FetchResult.success(
            [asset for asset in self.assets if category is None or asset.category == category]
        )

    async def list_distinct_tags(self):
        self.calls.append("list_distinct_tags")
        if self.failure:
            return self.failure
        return FetchResult.success(sorted({tag for r in self.releases for tag in r.tags}))


@pytest.fixture
def config() -> PressRoomConfig:
    return PressRoomConfig(
        contentful=ContentfulConfig(space_id="space123", access_token="token-abc"),
    )


@pytest.fixture
def fake_client(releases, press_kit_assets) -> FakeContentClient:
    return FakeContentClient(releases, press_kit_assets)


@pytest.fixture
def client(fake_client, config) -> TestClient:
    app = create_app(fake_client, config)
    return TestClient(app)


def contentful_payload(items: List[Dict[str, Any]], assets: Optional[List[Dict[str, Any]]] = None) -> Dict[str, Any]:
    payload: Dict[str, Any] = {"sys": {"type": "Array"}, "total": len(items), "items": items}
    if assets:
        payload["includes"] = {"Asset": assets}
    return payload


def image_asset(asset_id: str, url: str, width: int = 1600, height: int = 900) -> Dict[str, Any]:
    return {
        "sys": {"id": asset_id, "type": "Asset"},
        "fields": {
            "title": f"Image {asset_id}",
            "file": {
                "url": url,
                "contentType": "image/jpeg",
                "details": {"size": 1024, "image": {"width": width, "height": height}},
            },
        },
    }


def release_entry(
    slug: str,
    publish_date: str,
    category: str = "Awards",
    tags: Optional[List[str]] = None,
    cover_id: Optional[str] = None,
) -> Dict[str, Any]:
    fields: Dict[str, Any] = {
        "title": slug.replace("-", " ").title(),
        "slug": slug,
        "publishDate": publish_date,
        "summary": f"Summary of {slug}",
        "category": category,
        "content": {"nodeType": "document", "data": {}, "content": []},
    }
    if tags is not None:
        fields["tags"] = tags
    if cover_id:
        fields["coverImage"] = {"sys": {"type": "Link", "linkType": "Asset", "id": cover_id}}
    return {"sys": {"id": f"entry-{slug}", "type": "Entry"}, "fields": fields}


class RecordingTransport:
    """Builds an ``httpx.MockTransport`` that records requests and replays a response."""

    def __init__(self, payload: Any = None, status_code: int = 200, exc: Optional[Exception] = None) -> None:
        self.payload = payload if payload is not None else contentful_payload([])
        self.status_code = status_code
        self.exc = exc
        self.requests: List[httpx.Request] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.exc is not None:
            raise self.exc
        return httpx.Response(self.status_code, json=self.payload)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    @property
    def last_params(self) -> Dict[str, str]:
        return dict(self.requests[-1].url.params)


@pytest.fixture
def contentful_config() -> ContentfulConfig:
    return ContentfulConfig(space_id="space123", access_token="token-abc")


@pytest.fixture
def make_contentful(contentful_config):
    def _make(recorder: RecordingTransport, config: Optional[ContentfulConfig] = None) -> ContentfulClient:
        return ContentfulClient(config or contentful_config, transport=recorder.transport)

    return _make
