"""Locale resolution and message bundles."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from datetime import datetime
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Optional

from .models import local_naive

LOGGER = logging.getLogger(__name__)

LOCALES = ("en", "fr")
DEFAULT_LOCALE = "en"
LOCALE_COOKIE = "locale"
LOCALE_NAMES = {
    "en": "English",
    "fr": "Français",
}

MESSAGES_DIR = Path(__file__).resolve().parent / "messages"


def is_supported(locale: Optional[str]) -> bool:
    return locale in LOCALES


def resolve_locale(path_locale: Optional[str] = None, cookie_locale: Optional[str] = None) -> str:
    """Pick the display locale: path segment first, then cookie, then default."""

    for candidate in (path_locale, cookie_locale):
        if is_supported(candidate):
            return candidate  # type: ignore[return-value]
    return DEFAULT_LOCALE


def switch_locale_path(path: str, new_locale: str) -> str:
    """Rewrite ``path`` so that it is prefixed with ``new_locale``."""

    segments = [segment for segment in path.split("/") if segment]
    if segments and is_supported(segments[0]):
        segments.pop(0)
    suffix = "/" + "/".join(segments) if segments else ""
    return f"/{new_locale}{suffix}"


@lru_cache(maxsize=None)
def load_messages(locale: str) -> Dict[str, Any]:
    if not is_supported(locale):
        raise ValueError(f"unsupported locale: {locale!r}")
    path = MESSAGES_DIR / f"{locale}.json"
    return json.loads(path.read_text(encoding="utf-8"))


@dataclass(frozen=True)
class Translator:
    """Message lookup bound to one request's locale."""

    locale: str
    messages: Dict[str, Any] = field(repr=False)

    @classmethod
    def for_locale(cls, locale: str) -> "Translator":
        return cls(locale=locale, messages=load_messages(locale))

    def lookup(self, key: str) -> Any:
        node: Any = self.messages
        for part in key.split("."):
            if not isinstance(node, dict) or part not in node:
                return None
            node = node[part]
        return node

    def t(self, key: str, **params: Any) -> str:
        template = self.lookup(key)
        if not isinstance(template, str):
            LOGGER.debug("Missing %s message for %r", self.locale, key)
            return key
        if not params:
            return template
        try:
            return template.format(**params)
        except (KeyError, IndexError, ValueError):
            LOGGER.warning("Malformed %s message for %r: %r", self.locale, key, template)
            return template

    __call__ = t

    def format_date(self, value: datetime) -> str:
        """Long date, e.g. ``March 4, 2024`` or ``4 mars 2024``."""

        value = local_naive(value)
        months = self.lookup("dates.months") or []
        pattern = self.lookup("dates.long") or "{month} {day}, {year}"
        month = months[value.month - 1] if len(months) == 12 else value.strftime("%B")
        return pattern.format(day=value.day, month=month, year=value.year)


__all__ = [
    "DEFAULT_LOCALE",
    "LOCALES",
    "LOCALE_COOKIE",
    "LOCALE_NAMES",
    "Translator",
    "is_supported",
    "load_messages",
    "resolve_locale",
    "switch_locale_path",
]
