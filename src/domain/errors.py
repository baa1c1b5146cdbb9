"""
Error definitions for the resource resolver.

규칙:
- 정적 에셋 없음 → 에러 아님 (None 반환, 404 처리는 호출자 몫)
- 시작 시 템플릿 컴파일 실패 → ResolverInitError (프로세스 초기화 중단)
- 개발 모드 reload 실패 / 템플릿 없음 / 렌더 실패 → 요청 단위 에러
- 재시도 없음
"""

from typing import Any


class ResourceError(Exception):
    """
    리소스 해석 중 발생하는 에러의 기반 클래스.

    Usage:
        raise TemplateNotFoundError(ErrorCodes.TEMPLATE_NOT_FOUND, template="missing.html")
    """

    def __init__(self, code: str, **context: Any) -> None:
        self.code = code
        self.context = context
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        ctx_str = ", ".join(f"{k}={v!r}" for k, v in self.context.items())
        return f"[{self.code}] {ctx_str}" if ctx_str else f"[{self.code}]"

    def to_dict(self) -> dict[str, Any]:
        """로그/JSON 직렬화용."""
        return {
            "code": self.code,
            **self.context,
        }


class TemplateCompileError(ResourceError):
    """템플릿 세트 컴파일 실패 (문법 오류, 누락된 extends/include 대상 등)."""


class TemplateNotFoundError(ResourceError):
    """컴파일된 세트에 요청한 템플릿 이름이 없음."""


class TemplateRenderError(ResourceError):
    """렌더 시점 실패 (strict 모드의 undefined 변수 등)."""


class ResolverInitError(ResourceError):
    """Resolver 생성 실패. 호스팅 프로세스도 초기화에 실패해야 함."""


# =============================================================================
# Error Codes
# =============================================================================

class ErrorCodes:
    """에러 코드 상수."""

    # === Config / Bundle ===
    INVALID_CONFIG = "INVALID_CONFIG"
    BUNDLE_ROOT_NOT_FOUND = "BUNDLE_ROOT_NOT_FOUND"

    # === Compile ===
    TEMPLATE_SYNTAX_ERROR = "TEMPLATE_SYNTAX_ERROR"
    TEMPLATE_REFERENCE_MISSING = "TEMPLATE_REFERENCE_MISSING"
    TEMPLATE_REFERENCE_DYNAMIC = "TEMPLATE_REFERENCE_DYNAMIC"
    TEMPLATE_REFERENCE_CYCLE = "TEMPLATE_REFERENCE_CYCLE"
    TEMPLATE_DECODE_FAILED = "TEMPLATE_DECODE_FAILED"
    TEMPLATE_SOURCE_UNAVAILABLE = "TEMPLATE_SOURCE_UNAVAILABLE"

    # === Render ===
    TEMPLATE_NOT_FOUND = "TEMPLATE_NOT_FOUND"
    RENDER_FAILED = "RENDER_FAILED"

    # === Resolver ===
    RESOLVER_INIT_FAILED = "RESOLVER_INIT_FAILED"
