"""Asset storage backends."""

from .assets import (
    AssetPathBuilder,
    AssetStore,
    LocalAssetStore,
    SupabaseAssetStore,
    slugify_term,
)

__all__ = [
    "AssetPathBuilder",
    "AssetStore",
    "LocalAssetStore",
    "SupabaseAssetStore",
    "slugify_term",
]
