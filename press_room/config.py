"""Configuration helpers for the press room service."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional
import os

DEFAULT_CMS_LOCALES = "en:en-US,fr:fr"


def parse_locale_map(value: str) -> Dict[str, str]:
    """Parse ``"en:en-US,fr:fr"`` into ``{"en": "en-US", "fr": "fr"}``."""

    mapping: Dict[str, str] = {}
    for chunk in value.split(","):
        chunk = chunk.strip()
        if not chunk:
            continue
        site_locale, sep, cms_locale = chunk.partition(":")
        site_locale = site_locale.strip()
        cms_locale = cms_locale.strip()
        if not sep or not site_locale or not cms_locale:
            raise ValueError(f"invalid locale mapping entry: {chunk!r}")
        mapping[site_locale] = cms_locale
    return mapping


@dataclass
class ContentfulConfig:
    """Connection settings for the Contentful Content Delivery API."""

    space_id: Optional[str] = None
    access_token: Optional[str] = None
    environment: str = "master"
    host: str = "https://cdn.contentful.com"
    timeout: float = 10.0
    locales: Dict[str, str] = field(default_factory=lambda: parse_locale_map(DEFAULT_CMS_LOCALES))

    @property
    def is_configured(self) -> bool:
        return bool(self.space_id) and bool(self.access_token)

    @property
    def entries_path(self) -> str:
        return f"/spaces/{self.space_id}/environments/{self.environment}/entries"

    def cms_locale(self, locale: Optional[str]) -> Optional[str]:
        """Return the CMS locale code for a site locale, if one is mapped."""

        if not locale:
            return None
        return self.locales.get(locale)


@dataclass
class PressRoomConfig:
    """Top-level configuration for the service."""

    contentful: ContentfulConfig = field(default_factory=ContentfulConfig)
    revalidate_seconds: int = 300
    api_host: str = "0.0.0.0"
    api_port: int = int(os.getenv("PORT", "8080"))
    log_level: str = "INFO"
    site_name: str = "Eight Phases"

    @property
    def is_configured(self) -> bool:
        return self.contentful.is_configured

    @property
    def cache_control(self) -> str:
        return f"public, max-age={self.revalidate_seconds}"


def load_config() -> PressRoomConfig:
    """Load configuration from environment variables with sensible defaults."""

    contentful = ContentfulConfig(
        space_id=os.getenv("CONTENTFUL_SPACE_ID") or None,
        access_token=os.getenv("CONTENTFUL_ACCESS_TOKEN") or None,
        environment=os.getenv("CONTENTFUL_ENVIRONMENT", "master"),
        host=os.getenv("CONTENTFUL_HOST", "https://cdn.contentful.com").rstrip("/"),
        timeout=float(os.getenv("CONTENTFUL_TIMEOUT", "10")),
        locales=parse_locale_map(os.getenv("CONTENTFUL_LOCALES", DEFAULT_CMS_LOCALES)),
    )
    revalidate_seconds = int(os.getenv("REVALIDATE_SECONDS", "300"))
    if revalidate_seconds < 0:
        raise ValueError("REVALIDATE_SECONDS must not be negative")

    return PressRoomConfig(
        contentful=contentful,
        revalidate_seconds=revalidate_seconds,
        api_host=os.getenv("API_HOST", "0.0.0.0"),
        api_port=int(os.getenv("PORT", "8080")),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        site_name=os.getenv("SITE_NAME", "Eight Phases"),
    )


__all__ = [
    "ContentfulConfig",
    "PressRoomConfig",
    "load_config",
    "parse_locale_map",
]
