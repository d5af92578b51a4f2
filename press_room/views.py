"""Projection of fetched records into display-ready view models."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple
from urllib.parse import urlencode

from .filtering import clear_filters, has_active_filters, toggle_category, toggle_tag
from .i18n import Translator
from .models import (
    PRESS_KIT_CATEGORIES,
    PRESS_RELEASE_CATEGORIES,
    PressKitAsset,
    PressRelease,
    SearchFilters,
)

CATEGORY_COLORS: Dict[str, str] = {
    "Awards": "bg-yellow-500/20 text-yellow-400 border-yellow-500/30",
    "Hotel Openings": "bg-green-500/20 text-green-400 border-green-500/30",
    "Partnerships": "bg-blue-500/20 text-blue-400 border-blue-500/30",
    "Executive News": "bg-purple-500/20 text-purple-400 border-purple-500/30",
    "Company Updates": "bg-orange-500/20 text-orange-400 border-orange-500/30",
    "Events": "bg-pink-500/20 text-pink-400 border-pink-500/30",
    "Sustainability": "bg-emerald-500/20 text-emerald-400 border-emerald-500/30",
}
DEFAULT_CATEGORY_COLOR = "bg-gray-500/20 text-gray-400 border-gray-500/30"

CARD_TAG_LIMIT = 3
SIDEBAR_CATEGORY_LIMIT = 5
SIDEBAR_TAG_LIMIT = 8
DEFAULT_COVER_SIZE = (400, 300)
VIEW_MODES = ("grid", "list")


def category_color(category: str) -> str:
    return CATEGORY_COLORS.get(category, DEFAULT_CATEGORY_COLOR)


@dataclass
class ReleaseCard:
    title: str
    href: str
    summary: str
    category: str
    category_class: str
    date_label: str
    tags: List[str]
    hidden_tag_count: int
    cover_url: Optional[str] = None
    cover_width: int = DEFAULT_COVER_SIZE[0]
    cover_height: int = DEFAULT_COVER_SIZE[1]


def release_href(locale: str, slug: str) -> str:
    return f"/{locale}/press/{slug}"


def release_card(release: PressRelease, translator: Translator) -> ReleaseCard:
    cover = release.cover_image
    return ReleaseCard(
        title=release.title,
        href=release_href(translator.locale, release.slug),
        summary=release.summary,
        category=release.category,
        category_class=category_color(release.category),
        date_label=translator.format_date(release.publish_date),
        tags=release.tags[:CARD_TAG_LIMIT],
        hidden_tag_count=max(len(release.tags) - CARD_TAG_LIMIT, 0),
        cover_url=cover.absolute_url if cover else None,
        cover_width=(cover.width if cover and cover.width else DEFAULT_COVER_SIZE[0]),
        cover_height=(cover.height if cover and cover.height else DEFAULT_COVER_SIZE[1]),
    )


def results_label(translator: Translator, shown: int, total: int) -> str:
    if shown == total:
        return translator.t("pressRoom.results.showing", count=shown)
    return translator.t("pressRoom.results.filtered", filtered=shown, total=total)


@dataclass
class AssetCard:
    title: str
    description: Optional[str]
    size_label: str
    updated_label: Optional[str]
    download_url: str
    download_name: str


@dataclass
class AssetGroup:
    category: str
    title: str
    description: str
    assets: List[AssetCard] = field(default_factory=list)


def asset_card(asset: PressKitAsset, translator: Translator) -> AssetCard:
    return AssetCard(
        title=asset.title,
        description=asset.description,
        size_label=asset.size_label or translator.t("pressKit.sizeUnknown"),
        updated_label=translator.format_date(asset.last_updated) if asset.last_updated else None,
        download_url=asset.file.absolute_url,
        download_name=asset.file.title or asset.title,
    )


def group_assets(assets: Sequence[PressKitAsset], translator: Translator) -> List[AssetGroup]:
    """Group assets by category, known categories first and in their fixed order."""

    by_category: Dict[str, List[PressKitAsset]] = {}
    for asset in assets:
        by_category.setdefault(asset.category, []).append(asset)

    ordered = [category for category in PRESS_KIT_CATEGORIES if category in by_category]
    ordered += [category for category in by_category if category not in PRESS_KIT_CATEGORIES]

    groups: List[AssetGroup] = []
    for category in ordered:
        key = f"pressKit.assetCategories.{category}"
        groups.append(
            AssetGroup(
                category=category,
                title=translator.lookup(f"{key}.title") or category,
                description=translator.lookup(f"{key}.description") or "",
                assets=[asset_card(asset, translator) for asset in by_category[category]],
            )
        )
    return groups


def filters_query(filters: SearchFilters, view: str = "grid", /, **extra: str) -> str:
    """Encode filter state as a query string (without the leading ``?``)."""

    pairs: List[Tuple[str, str]] = []
    if filters.query:
        pairs.append(("q", filters.query))
    if filters.category:
        pairs.append(("category", filters.category))
    if filters.date_from is not None:
        pairs.append(("date_from", filters.date_from.isoformat()))
    if filters.date_to is not None:
        pairs.append(("date_to", filters.date_to.isoformat()))
    for tag in filters.tags or []:
        pairs.append(("tag", tag))
    if view != "grid":
        pairs.append(("view", view))
    pairs.extend((key, value) for key, value in extra.items() if value)
    return urlencode(pairs)


def filters_url(path: str, filters: SearchFilters, view: str = "grid", /, **extra: str) -> str:
    query = filters_query(filters, view, **extra)
    return f"{path}?{query}" if query else path


@dataclass
class SidebarOption:
    label: str
    active: bool
    href: str


@dataclass
class Sidebar:
    categories: List[SidebarOption]
    hidden_category_count: int
    tags: List[SidebarOption]
    hidden_tag_count: int
    active: bool
    clear_href: str
    active_category: Optional[SidebarOption] = None
    active_tags: List[SidebarOption] = field(default_factory=list)
    clear_dates_href: Optional[str] = None


def sidebar(
    path: str,
    filters: SearchFilters,
    available_tags: Sequence[str],
    view: str = "grid",
    show_all_categories: bool = False,
    show_all_tags: bool = False,
) -> Sidebar:
    """Build the filter sidebar; every option links to the toggled filter state."""

    def option(label: str, active: bool, toggled: SearchFilters) -> SidebarOption:
        return SidebarOption(label=label, active=active, href=filters_url(path, toggled, view))

    categories = list(PRESS_RELEASE_CATEGORIES)
    shown_categories = categories if show_all_categories else categories[:SIDEBAR_CATEGORY_LIMIT]
    shown_tags = list(available_tags) if show_all_tags else list(available_tags[:SIDEBAR_TAG_LIMIT])
    selected_tags = filters.tags or []

    active_category = None
    if filters.category:
        active_category = option(filters.category, True, toggle_category(filters, filters.category))

    clear_dates_href = None
    if filters.date_from is not None or filters.date_to is not None:
        without_dates = SearchFilters(
            query=filters.query, category=filters.category, tags=filters.tags
        )
        clear_dates_href = filters_url(path, without_dates, view)

    return Sidebar(
        categories=[
            option(name, filters.category == name, toggle_category(filters, name))
            for name in shown_categories
        ],
        hidden_category_count=len(categories) - len(shown_categories),
        tags=[option(tag, tag in selected_tags, toggle_tag(filters, tag)) for tag in shown_tags],
        hidden_tag_count=len(available_tags) - len(shown_tags),
        active=has_active_filters(filters),
        clear_href=filters_url(path, clear_filters(filters), view),
        active_category=active_category,
        active_tags=[option(tag, True, toggle_tag(filters, tag)) for tag in selected_tags],
        clear_dates_href=clear_dates_href,
    )


__all__ = [
    "AssetCard",
    "AssetGroup",
    "ReleaseCard",
    "Sidebar",
    "SidebarOption",
    "VIEW_MODES",
    "asset_card",
    "category_color",
    "filters_query",
    "filters_url",
    "group_assets",
    "release_card",
    "release_href",
    "results_label",
    "sidebar",
]
