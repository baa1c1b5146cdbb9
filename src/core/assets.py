"""
Asset Store: 불변 번들 (상대 경로 → bytes) + 번들 소스.

규칙:
- 번들은 1회 생성 후 프로세스 수명 동안 읽기 전용
- 조회 실패는 에러가 아님 → None 반환
- 확장자 허용 목록에 없는 파일은 번들에 포함하지 않음
- 프로덕션: 시작 시 스냅샷 (FrozenBundleSource), 이후 파일시스템 접근 없음
- 개발: load() 때마다 디렉터리 재탐색 (DirectoryBundleSource)
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterable, Iterator, Mapping
from pathlib import Path
from types import MappingProxyType

from src.domain.errors import ErrorCodes, ResourceError

logger = logging.getLogger(__name__)


def normalize_asset_path(path: str) -> str:
    """번들 키 형식으로 정규화 (POSIX 구분자, 선행 / 제거)."""
    return path.replace("\\", "/").lstrip("/")


def _matches_extension(name: str, extensions: tuple[str, ...]) -> bool:
    # 대소문자 무시 (LOGO.PNG도 .png로 취급)
    lowered = name.lower()
    return any(lowered.endswith(ext) for ext in extensions)


def collect_files(
    root: Path,
    extensions: Iterable[str],
) -> dict[str, bytes]:
    """
    root 아래 파일을 재귀 수집.

    Args:
        root: 디렉터리
        extensions: 허용 확장자 (예: (".js", ".css"))

    Returns:
        상대 경로 → bytes

    Raises:
        ResourceError: BUNDLE_ROOT_NOT_FOUND
    """
    allowed = tuple(ext.lower() for ext in extensions)

    if not root.is_dir():
        raise ResourceError(
            ErrorCodes.BUNDLE_ROOT_NOT_FOUND,
            root=str(root),
        )

    collected: dict[str, bytes] = {}
    stack: list[tuple[str, Path]] = [("", root)]
    while stack:
        prefix, directory = stack.pop()
        for entry in directory.iterdir():
            # 숨김 파일/디렉터리 제외 (.DS_Store, .git 등)
            if entry.name.startswith("."):
                continue
            rel_path = f"{prefix}{entry.name}"
            if entry.is_dir():
                stack.append((f"{rel_path}/", entry))
            elif entry.is_file() and _matches_extension(entry.name, allowed):
                collected[rel_path] = entry.read_bytes()

    return collected


# =============================================================================
# Asset Bundle
# =============================================================================

class AssetBundle(Mapping[str, bytes]):
    """
    불변 에셋 번들.

    Usage:
        bundle = AssetBundle.from_directory(static_root, STATIC_EXTENSIONS)
        data = bundle.get("scripts/app.js")  # bytes | None
    """

    def __init__(self, files: Mapping[str, bytes] | None = None):
        normalized = {
            normalize_asset_path(path): bytes(data)
            for path, data in (files or {}).items()
        }
        self._files: Mapping[str, bytes] = MappingProxyType(normalized)

    @classmethod
    def empty(cls) -> "AssetBundle":
        return cls()

    @classmethod
    def from_directory(
        cls,
        root: Path,
        extensions: Iterable[str],
    ) -> "AssetBundle":
        """디렉터리 스냅샷으로 번들 생성."""
        bundle = cls(collect_files(root, extensions))
        logger.debug(f"Bundled {len(bundle)} files from {root}")
        return bundle

    def get(self, path: str, default: bytes | None = None) -> bytes | None:
        """
        정확한 경로로 조회.

        Returns:
            등록된 bytes, 없으면 default (기본 None)
        """
        return self._files.get(normalize_asset_path(path), default)

    def __getitem__(self, path: str) -> bytes:
        return self._files[normalize_asset_path(path)]

    def __contains__(self, path: object) -> bool:
        if not isinstance(path, str):
            return False
        return normalize_asset_path(path) in self._files

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._files))

    def __len__(self) -> int:
        return len(self._files)

    def __repr__(self) -> str:
        return f"AssetBundle(files={len(self)}, bytes={self.total_size})"

    @property
    def total_size(self) -> int:
        return sum(len(data) for data in self._files.values())


# =============================================================================
# Bundle Sources
# =============================================================================

class BundleSource(ABC):
    """번들 제공자. Resolver는 reload 때마다 load()를 호출."""

    @abstractmethod
    def load(self) -> AssetBundle:
        """현재 번들 반환."""

    @abstractmethod
    def describe(self) -> str:
        """로그용 설명."""


class FrozenBundleSource(BundleSource):
    """생성 시점 번들을 항상 그대로 반환 (프로덕션)."""

    def __init__(self, bundle: AssetBundle):
        self._bundle = bundle

    def load(self) -> AssetBundle:
        return self._bundle

    def describe(self) -> str:
        return f"frozen bundle ({len(self._bundle)} files)"


class DirectoryBundleSource(BundleSource):
    """load() 때마다 디렉터리를 다시 읽음 (개발 모드 live reload)."""

    def __init__(self, root: Path, extensions: Iterable[str]):
        self.root = Path(root)
        self.extensions = tuple(extensions)

    def load(self) -> AssetBundle:
        return AssetBundle.from_directory(self.root, self.extensions)

    def freeze(self) -> FrozenBundleSource:
        """현재 디렉터리 내용을 스냅샷으로 고정."""
        return FrozenBundleSource(self.load())

    def describe(self) -> str:
        return f"directory {self.root}"
