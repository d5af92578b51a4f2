"""Content fetching from the Contentful Content Delivery API."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, datetime, time
from typing import Any, Dict, List, Optional, Sequence

import httpx
from dateutil import parser as dtparse

from .config import ContentfulConfig
from .filtering import END_OF_DAY, tag_vocabulary
from .models import (
    ErrorKind,
    FetchResult,
    FileAsset,
    ImageAsset,
    PressKitAsset,
    PressRelease,
    SearchFilters,
)

LOGGER = logging.getLogger(__name__)

PRESS_RELEASE_TYPE = "pressRelease"
PRESS_KIT_ASSET_TYPE = "pressKitAsset"
TAG_SCAN_LIMIT = 1000

CONFIG_ERROR = (
    "Contentful environment variables are not set. Please add CONTENTFUL_SPACE_ID "
    "and CONTENTFUL_ACCESS_TOKEN to your environment."
)
NOT_FOUND_ERROR = "Press release not found."
FETCH_ERROR = "Failed to fetch data from Contentful."
RELATED_ERROR = "Failed to fetch related press releases."
ASSETS_ERROR = "Failed to fetch press kit assets."
TAGS_ERROR = "Failed to fetch press release tags."

_PAYLOAD_ERRORS = (httpx.HTTPError, KeyError, TypeError, ValueError)


@dataclass
class EntryQuery:
    """Typed query options mapped onto the delivery API's search parameters."""

    content_type: str
    order: Sequence[str] = ()
    category: Optional[str] = None
    date_from: Optional[date] = None
    date_to: Optional[date] = None
    tags: Sequence[str] = ()
    query: Optional[str] = None
    slug: Optional[str] = None
    exclude_slug: Optional[str] = None
    limit: Optional[int] = None
    select: Sequence[str] = field(default_factory=tuple)
    locale: Optional[str] = None

    @classmethod
    def for_releases(
        cls, filters: Optional[SearchFilters] = None, **kwargs: Any
    ) -> "EntryQuery":
        filters = filters or SearchFilters()
        return cls(
            content_type=PRESS_RELEASE_TYPE,
            order=("-fields.publishDate",),
            category=filters.category,
            date_from=filters.date_from,
            date_to=filters.date_to,
            tags=tuple(filters.tags or ()),
            query=filters.query,
            **kwargs,
        )

    def to_params(self) -> Dict[str, str]:
        params: Dict[str, str] = {"content_type": self.content_type}
        if self.order:
            params["order"] = ",".join(self.order)
        if self.category:
            params["fields.category"] = self.category
        if self.date_from is not None:
            params["fields.publishDate[gte]"] = datetime.combine(self.date_from, time.min).isoformat()
        if self.date_to is not None:
            params["fields.publishDate[lte]"] = datetime.combine(
                self.date_to, END_OF_DAY
            ).isoformat(timespec="milliseconds")
        if self.tags:
            params["fields.tags[in]"] = ",".join(self.tags)
        if self.query:
            params["query"] = self.query
        if self.slug is not None:
            params["fields.slug"] = self.slug
        if self.exclude_slug is not None:
            params["fields.slug[ne]"] = self.exclude_slug
        if self.limit is not None:
            params["limit"] = str(self.limit)
        if self.select:
            params["select"] = ",".join(self.select)
        if self.locale:
            params["locale"] = self.locale
        return params


def parse_timestamp(value: Any) -> Optional[datetime]:
    if not value:
        return None
    return dtparse.parse(str(value))


def _index_assets(payload: Dict[str, Any]) -> Dict[str, Dict[str, Any]]:
    includes = payload.get("includes") or {}
    return {asset["sys"]["id"]: asset for asset in includes.get("Asset", [])}


def _resolve_link(value: Any, assets: Dict[str, Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    """Return the included asset a link points at, or the value if already resolved."""

    if not isinstance(value, dict):
        return None
    sys = value.get("sys") or {}
    if sys.get("type") == "Link":
        return assets.get(sys.get("id", ""))
    return value


def _map_image(asset: Optional[Dict[str, Any]]) -> Optional[ImageAsset]:
    if not asset:
        return None
    fields = asset.get("fields") or {}
    file_info = fields.get("file") or {}
    url = file_info.get("url")
    if not url:
        return None
    dimensions = (file_info.get("details") or {}).get("image") or {}
    return ImageAsset(
        url=url,
        width=dimensions.get("width"),
        height=dimensions.get("height"),
        title=fields.get("title"),
        description=fields.get("description"),
        content_type=file_info.get("contentType"),
    )


def _map_file(asset: Optional[Dict[str, Any]]) -> Optional[FileAsset]:
    if not asset:
        return None
    fields = asset.get("fields") or {}
    file_info = fields.get("file") or {}
    url = file_info.get("url")
    if not url:
        return None
    return FileAsset(
        url=url,
        title=fields.get("title"),
        file_name=file_info.get("fileName"),
        content_type=file_info.get("contentType"),
        size=(file_info.get("details") or {}).get("size"),
    )


def _resolve_rich_text(node: Any, assets: Dict[str, Dict[str, Any]]) -> Any:
    """Copy a rich-text tree, swapping embedded asset links for included assets."""

    if not isinstance(node, dict):
        return node
    resolved = dict(node)
    data = node.get("data")
    if isinstance(data, dict) and "target" in data:
        target = _resolve_link(data["target"], assets)
        resolved["data"] = {**data, "target": target}
    children = node.get("content")
    if isinstance(children, list):
        resolved["content"] = [_resolve_rich_text(child, assets) for child in children]
    return resolved


def map_press_release(entry: Dict[str, Any], assets: Dict[str, Dict[str, Any]]) -> PressRelease:
    fields = entry["fields"]
    publish_date = parse_timestamp(fields.get("publishDate"))
    if publish_date is None:
        raise ValueError(f"press release {fields.get('slug')!r} has no publishDate")
    return PressRelease(
        title=fields["title"],
        slug=fields["slug"],
        publish_date=publish_date,
        summary=fields.get("summary") or "",
        category=fields.get("category") or "",
        tags=list(fields.get("tags") or []),
        cover_image=_map_image(_resolve_link(fields.get("coverImage"), assets)),
        content=_resolve_rich_text(fields.get("content") or {}, assets),
        entry_id=(entry.get("sys") or {}).get("id"),
    )


def map_press_kit_asset(entry: Dict[str, Any], assets: Dict[str, Dict[str, Any]]) -> PressKitAsset:
    fields = entry["fields"]
    file_asset = _map_file(_resolve_link(fields.get("file"), assets))
    if file_asset is None:
        raise ValueError(f"press kit asset {fields.get('title')!r} has no file")
    return PressKitAsset(
        title=fields["title"],
        category=fields.get("category") or "",
        file=file_asset,
        description=fields.get("description"),
        file_size=fields.get("fileSize"),
        last_updated=parse_timestamp(fields.get("lastUpdated")),
        entry_id=(entry.get("sys") or {}).get("id"),
    )


class ContentfulClient:
    """Read-only access to press room content.

    Every operation returns a :class:`FetchResult`; transport and payload
    errors are logged and folded into the result instead of being raised.
    """

    def __init__(
        self,
        config: ContentfulConfig,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.config = config
        self._transport = transport

    def _http_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.config.host,
            headers={"Authorization": f"Bearer {self.config.access_token}"},
            timeout=self.config.timeout,
            transport=self._transport,
        )

    def _configuration_error(self) -> Optional[FetchResult[Any]]:
        if self.config.is_configured:
            return None
        LOGGER.error(CONFIG_ERROR)
        return FetchResult.failure(ErrorKind.CONFIGURATION, CONFIG_ERROR)

    async def _get_entries(self, query: EntryQuery) -> Dict[str, Any]:
        params = query.to_params()
        LOGGER.debug("Fetching %s entries with %s", query.content_type, params)
        async with self._http_client() as client:
            response = await client.get(self.config.entries_path, params=params)
            response.raise_for_status()
            payload = response.json()
        if not isinstance(payload, dict):
            raise ValueError(f"expected a JSON object, got {type(payload).__name__}")
        return payload

    async def list_press_releases(
        self,
        filters: Optional[SearchFilters] = None,
        locale: Optional[str] = None,
    ) -> FetchResult[List[PressRelease]]:
        failed = self._configuration_error()
        if failed is not None:
            return failed
        query = EntryQuery.for_releases(filters, locale=self.config.cms_locale(locale))
        try:
            payload = await self._get_entries(query)
            assets = _index_assets(payload)
            releases = [map_press_release(item, assets) for item in payload.get("items", [])]
        except _PAYLOAD_ERRORS:
            LOGGER.exception("Fetching press releases failed")
            return FetchResult.failure(ErrorKind.UPSTREAM, FETCH_ERROR)
        LOGGER.info("Fetched %d press releases", len(releases))
        return FetchResult.success(releases)

    async def get_press_release_by_slug(
        self,
        slug: str,
        locale: Optional[str] = None,
    ) -> FetchResult[PressRelease]:
        failed = self._configuration_error()
        if failed is not None:
            return failed
        query = EntryQuery(
            content_type=PRESS_RELEASE_TYPE,
            slug=slug,
            limit=1,
            locale=self.config.cms_locale(locale),
        )
        try:
            payload = await self._get_entries(query)
            items = payload.get("items", [])
            release = map_press_release(items[0], _index_assets(payload)) if items else None
        except _PAYLOAD_ERRORS:
            LOGGER.exception("Fetching press release %r failed", slug)
            return FetchResult.failure(ErrorKind.UPSTREAM, FETCH_ERROR)
        if release is None:
            LOGGER.info("Press release %r not found", slug)
            return FetchResult.failure(ErrorKind.NOT_FOUND, NOT_FOUND_ERROR)
        return FetchResult.success(release)

    async def list_related(
        self,
        slug: str,
        category: str,
        tags: Optional[Sequence[str]] = None,
        limit: int = 3,
        locale: Optional[str] = None,
    ) -> FetchResult[List[PressRelease]]:
        failed = self._configuration_error()
        if failed is not None:
            return failed
        query = EntryQuery(
            content_type=PRESS_RELEASE_TYPE,
            order=("-fields.publishDate",),
            category=category,
            tags=tuple(tags or ()),
            exclude_slug=slug,
            limit=limit,
            locale=self.config.cms_locale(locale),
        )
        try:
            payload = await self._get_entries(query)
            assets = _index_assets(payload)
            related = [map_press_release(item, assets) for item in payload.get("items", [])]
        except _PAYLOAD_ERRORS:
            LOGGER.exception("Fetching releases related to %r failed", slug)
            return FetchResult.failure(ErrorKind.UPSTREAM, RELATED_ERROR)
        return FetchResult.success([release for release in related if release.slug != slug])

    async def list_press_kit_assets(
        self,
        category: Optional[str] = None,
        locale: Optional[str] = None,
    ) -> FetchResult[List[PressKitAsset]]:
        failed = self._configuration_error()
        if failed is not None:
            return failed
        query = EntryQuery(
            content_type=PRESS_KIT_ASSET_TYPE,
            order=("fields.category", "fields.title"),
            category=category,
            locale=self.config.cms_locale(locale),
        )
        try:
            payload = await self._get_entries(query)
            assets = _index_assets(payload)
            kit = [map_press_kit_asset(item, assets) for item in payload.get("items", [])]
        except _PAYLOAD_ERRORS:
            LOGGER.exception("Fetching press kit assets failed")
            return FetchResult.failure(ErrorKind.UPSTREAM, ASSETS_ERROR)
        LOGGER.info("Fetched %d press kit assets", len(kit))
        return FetchResult.success(kit)

    async def list_distinct_tags(self) -> FetchResult[List[str]]:
        failed = self._configuration_error()
        if failed is not None:
            return failed
        query = EntryQuery(
            content_type=PRESS_RELEASE_TYPE,
            select=("fields.tags",),
            limit=TAG_SCAN_LIMIT,
        )
        try:
            payload = await self._get_entries(query)
            tags = tag_vocabulary(
                (item.get("fields") or {}).get("tags") or [] for item in payload.get("items", [])
            )
        except _PAYLOAD_ERRORS:
            LOGGER.exception("Fetching press release tags failed")
            return FetchResult.failure(ErrorKind.UPSTREAM, TAGS_ERROR)
        return FetchResult.success(tags)


__all__ = [
    "ContentfulClient",
    "EntryQuery",
    "map_press_kit_asset",
    "map_press_release",
    "parse_timestamp",
]
