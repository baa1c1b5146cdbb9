"""
Data schemas for the resource resolver.

규칙:
- mode는 배포 시점 설정값 (요청/런타임 플래그로 전환하지 않음)
- reload 실패 정책은 이름 있는 값으로 명시 (추론 금지)
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

from src.domain.constants import DEFAULT_STATIC_ROOT, DEFAULT_TEMPLATES_ROOT
from src.domain.errors import ErrorCodes, ResourceError

# =============================================================================
# Enums
# =============================================================================

class Mode(str, Enum):
    """배포 모드."""
    DEVELOPMENT = "development"  # 매 렌더 전 템플릿 전체 재컴파일
    PRODUCTION = "production"    # 시작 시 1회 컴파일


class ReloadFailurePolicy(str, Enum):
    """
    개발 모드 reload 컴파일 실패 시 동작.

    어느 쪽이든 마지막 정상 세트는 교체되지 않음.
    """
    FAIL_REQUEST = "fail_request"        # 진행 중인 요청을 실패 처리
    SERVE_LAST_GOOD = "serve_last_good"  # 경고 로그 후 마지막 정상 세트로 렌더


def _parse_enum(enum_cls: type[Enum], value: Any, key: str) -> Any:
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(str(value).strip().lower())
    except ValueError as e:
        raise ResourceError(
            ErrorCodes.INVALID_CONFIG,
            key=key,
            value=value,
            allowed=[m.value for m in enum_cls],
        ) from e


def _resolve_root(value: Any, base_dir: Path | None, default: Path) -> Path:
    if value is None or value == "":
        return default
    path = Path(value)
    if not path.is_absolute() and base_dir is not None:
        path = base_dir / path
    return path


# =============================================================================
# Config
# =============================================================================

@dataclass(frozen=True)
class ResolverConfig:
    """
    Resolver 설정 (default.yaml의 resources 섹션).

    상대 경로 root는 설정 파일 디렉터리 기준으로 해석.
    """
    mode: Mode = Mode.PRODUCTION
    static_root: Path = field(default=DEFAULT_STATIC_ROOT)
    templates_root: Path = field(default=DEFAULT_TEMPLATES_ROOT)

    strict_undefined: bool = True
    autoescape: bool = True
    reload_failure_policy: ReloadFailurePolicy = ReloadFailurePolicy.FAIL_REQUEST

    @property
    def is_development(self) -> bool:
        return self.mode is Mode.DEVELOPMENT

    def to_dict(self) -> dict[str, Any]:
        return {
            "mode": self.mode.value,
            "static_root": str(self.static_root),
            "templates_root": str(self.templates_root),
            "strict_undefined": self.strict_undefined,
            "autoescape": self.autoescape,
            "reload_failure_policy": self.reload_failure_policy.value,
        }

    @classmethod
    def from_dict(
        cls,
        data: dict[str, Any] | None,
        base_dir: Path | None = None,
    ) -> "ResolverConfig":
        """
        dict에서 설정 생성.

        Args:
            data: resources 섹션 (None이면 기본값)
            base_dir: 상대 경로 기준 디렉터리

        Raises:
            ResourceError: INVALID_CONFIG
        """
        data = data or {}
        if not isinstance(data, dict):
            raise ResourceError(
                ErrorCodes.INVALID_CONFIG,
                key="resources",
                value=data,
            )

        return cls(
            mode=_parse_enum(Mode, data.get("mode", Mode.PRODUCTION), "mode"),
            static_root=_resolve_root(
                data.get("static_root"), base_dir, DEFAULT_STATIC_ROOT
            ),
            templates_root=_resolve_root(
                data.get("templates_root"), base_dir, DEFAULT_TEMPLATES_ROOT
            ),
            strict_undefined=bool(data.get("strict_undefined", True)),
            autoescape=bool(data.get("autoescape", True)),
            reload_failure_policy=_parse_enum(
                ReloadFailurePolicy,
                data.get("reload_failure_policy", ReloadFailurePolicy.FAIL_REQUEST),
                "reload_failure_policy",
            ),
        )
