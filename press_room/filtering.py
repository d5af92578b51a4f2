"""In-memory search and filtering over fetched press releases."""

from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime, time
from typing import Callable, Iterable, List, Optional, Sequence

from .models import PressRelease, SearchFilters, local_naive

END_OF_DAY = time(23, 59, 59, 999000)

Predicate = Callable[[PressRelease], bool]


def _start_of_day(day: date) -> datetime:
    return datetime.combine(day, time.min)


def _end_of_day(day: date) -> datetime:
    return datetime.combine(day, END_OF_DAY)


def matches_query(release: PressRelease, query: str) -> bool:
    """Case-insensitive substring match on title, summary, category or any tag."""

    needle = query.lower()
    if needle in release.title.lower() or needle in release.summary.lower():
        return True
    if release.category and needle in release.category.lower():
        return True
    return any(needle in tag.lower() for tag in release.tags)


def build_predicates(filters: SearchFilters) -> List[Predicate]:
    """Return one predicate per active criterion of ``filters``."""

    predicates: List[Predicate] = []

    if filters.query:
        query = filters.query
        predicates.append(lambda release: matches_query(release, query))

    if filters.category:
        category = filters.category
        predicates.append(lambda release: release.category == category)

    if filters.tags:
        wanted = set(filters.tags)
        predicates.append(lambda release: not wanted.isdisjoint(release.tags))

    if filters.date_from is not None:
        lower = _start_of_day(filters.date_from)
        predicates.append(lambda release: local_naive(release.publish_date) >= lower)

    if filters.date_to is not None:
        upper = _end_of_day(filters.date_to)
        predicates.append(lambda release: local_naive(release.publish_date) <= upper)

    return predicates


def apply_filters(
    items: Sequence[PressRelease],
    filters: Optional[SearchFilters] = None,
) -> List[PressRelease]:
    """Keep the items matching every active filter, preserving input order."""

    if filters is None:
        return list(items)
    predicates = build_predicates(filters)
    return [item for item in items if all(check(item) for check in predicates)]


def tag_vocabulary(tag_lists: Iterable[Iterable[str]]) -> List[str]:
    vocabulary = set()
    for tags in tag_lists:
        vocabulary.update(tags)
    return sorted(vocabulary)


def distinct_tags(items: Iterable[PressRelease]) -> List[str]:
    """Return the sorted, de-duplicated tag vocabulary across ``items``."""

    return tag_vocabulary(item.tags for item in items)


def toggle_category(filters: SearchFilters, category: str) -> SearchFilters:
    if filters.category == category:
        return replace(filters, category=None)
    return replace(filters, category=category)


def toggle_tag(filters: SearchFilters, tag: str) -> SearchFilters:
    current = list(filters.tags or [])
    if tag in current:
        current = [existing for existing in current if existing != tag]
    else:
        current.append(tag)
    return replace(filters, tags=current or None)


def clear_filters(filters: SearchFilters) -> SearchFilters:
    """Drop every criterion except the free-text query."""

    return SearchFilters(query=filters.query)


def has_active_filters(filters: SearchFilters) -> bool:
    return bool(
        filters.category
        or filters.date_from is not None
        or filters.date_to is not None
        or filters.tags
    )


__all__ = [
    "apply_filters",
    "build_predicates",
    "clear_filters",
    "distinct_tags",
    "has_active_filters",
    "matches_query",
    "tag_vocabulary",
    "toggle_category",
    "toggle_tag",
]
