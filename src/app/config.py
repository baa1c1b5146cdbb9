"""
설정 로드: default.yaml → ResolverConfig.

우선순위:
1. 명시적 경로 인자
2. SITE_RESOURCES_CONFIG 환경변수 (배포 시점 설정)
3. 프로젝트 루트의 default.yaml
파일이 없으면 기본값 사용.
"""

import os
from pathlib import Path
from typing import Any

import yaml

from src.domain.constants import (
    CONFIG_ENV_VAR,
    CONFIG_FILENAME,
    CONFIG_SECTION_RESOURCES,
    CONFIG_SECTION_SERVER,
    DEFAULT_HOST,
    DEFAULT_PORT,
)
from src.domain.errors import ErrorCodes, ResourceError
from src.domain.schemas import ResolverConfig

PROJECT_ROOT = Path(__file__).parent.parent.parent


def resolve_config_path(config_path: Path | None = None) -> Path:
    """사용할 설정 파일 경로 결정."""
    if config_path is not None:
        return Path(config_path)

    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path)

    return PROJECT_ROOT / CONFIG_FILENAME


def load_config(config_path: Path | None = None) -> dict[str, Any]:
    """
    설정 파일 로드.

    Raises:
        ResourceError: INVALID_CONFIG (YAML 파싱 실패, 최상위가 mapping이 아님)
    """
    path = resolve_config_path(config_path)
    if not path.exists():
        return {}

    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ResourceError(
            ErrorCodes.INVALID_CONFIG,
            path=str(path),
            error=str(e),
        ) from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ResourceError(
            ErrorCodes.INVALID_CONFIG,
            path=str(path),
            error="top-level value must be a mapping",
        )
    return data


def load_resolver_config(config_path: Path | None = None) -> ResolverConfig:
    """resources 섹션 → ResolverConfig (상대 경로는 설정 파일 기준)."""
    path = resolve_config_path(config_path)
    data = load_config(path)
    return ResolverConfig.from_dict(
        data.get(CONFIG_SECTION_RESOURCES),
        base_dir=path.parent,
    )


def load_server_settings(config_path: Path | None = None) -> tuple[str, int]:
    """server 섹션 → (host, port)."""
    server = load_config(config_path).get(CONFIG_SECTION_SERVER) or {}
    return (
        str(server.get("host", DEFAULT_HOST)),
        int(server.get("port", DEFAULT_PORT)),
    )
