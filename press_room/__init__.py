"""Press room web application package."""

from .config import ContentfulConfig, PressRoomConfig, load_config
from .contentful import ContentfulClient
from .filtering import apply_filters, distinct_tags
from .models import PressKitAsset, PressRelease, SearchFilters
from .server import create_app

__all__ = [
    "ContentfulClient",
    "ContentfulConfig",
    "PressKitAsset",
    "PressRelease",
    "PressRoomConfig",
    "SearchFilters",
    "apply_filters",
    "create_app",
    "distinct_tags",
    "load_config",
]
