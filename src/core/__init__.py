"""
Core layer: 번들과 동기화 기본 요소.

역할:
- 불변 에셋 번들, 번들 소스 (assets.py)
- 컴파일된 템플릿 세트 교체용 reader-writer lock (rwlock.py)
"""

from .assets import (
    AssetBundle,
    BundleSource,
    DirectoryBundleSource,
    FrozenBundleSource,
    collect_files,
    normalize_asset_path,
)
from .rwlock import ReadWriteLock

__all__ = [
    # assets
    "AssetBundle",
    "BundleSource",
    "FrozenBundleSource",
    "DirectoryBundleSource",
    "collect_files",
    "normalize_asset_path",
    # rwlock
    "ReadWriteLock",
]
