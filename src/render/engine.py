"""
Template Engine: Jinja2 기반 HTML 템플릿 컴파일/렌더.

규칙:
- 컴파일 시점에 모든 extends/include/import 대상을 검증
  → 렌더 시점 실패는 데이터/컨텍스트 문제로 한정 (구조 문제 없음)
- 하나라도 실패하면 세트 전체 실패 (부분 컴파일 세트 없음)
- 등록 순서 무관 (이름 정렬 순서로 처리)
- strict_undefined: True → 미정의 변수 에러, False → 빈 문자열 치환
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime
from types import MappingProxyType
from typing import Any

from jinja2 import (
    ChainableUndefined,
    DictLoader,
    Environment,
    StrictUndefined,
    Template,
    TemplateSyntaxError,
    nodes,
    select_autoescape,
)

from src.core.assets import AssetBundle
from src.domain.constants import AUTOESCAPE_EXTENSIONS, OUTPUT_ENCODING
from src.domain.errors import (
    ErrorCodes,
    TemplateCompileError,
    TemplateNotFoundError,
    TemplateRenderError,
)

logger = logging.getLogger(__name__)

_REFERENCE_NODES = (nodes.Extends, nodes.Include, nodes.Import, nodes.FromImport)


@dataclass(frozen=True)
class TemplateOptions:
    """Jinja2 Environment 옵션."""
    strict_undefined: bool = True
    autoescape: bool = True
    trim_blocks: bool = False
    lstrip_blocks: bool = False


@dataclass(frozen=True)
class CompiledTemplateSet:
    """
    렌더 가능한 템플릿 세트.

    reload 시 통째로 교체됨 (부분 수정 없음).
    """
    environment: Environment
    templates: Mapping[str, Template]
    generation: int = 0
    compiled_at: str = field(default_factory=lambda: datetime.now(UTC).isoformat())

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(sorted(self.templates))

    def __contains__(self, name: object) -> bool:
        return name in self.templates

    def __len__(self) -> int:
        return len(self.templates)

    def render(self, name: str, context: Mapping[str, Any] | None = None) -> bytes:
        return render_template(self, name, context)


# =============================================================================
# Sources
# =============================================================================

def load_template_sources(bundle: AssetBundle) -> dict[str, str]:
    """
    번들 → Template Source Set (경로 → UTF-8 텍스트).

    Raises:
        TemplateCompileError: TEMPLATE_DECODE_FAILED
    """
    sources: dict[str, str] = {}
    for path in bundle:
        try:
            sources[path] = bundle[path].decode("utf-8")
        except UnicodeDecodeError as e:
            raise TemplateCompileError(
                ErrorCodes.TEMPLATE_DECODE_FAILED,
                template=path,
                error=str(e),
            ) from e
    return sources


# =============================================================================
# Compile
# =============================================================================

def build_environment(
    sources: Mapping[str, str],
    options: TemplateOptions,
) -> Environment:
    """소스 세트 전용 Environment 생성 (auto_reload 없음, 캐시 무제한)."""
    autoescape: Any = False
    if options.autoescape:
        autoescape = select_autoescape(
            enabled_extensions=AUTOESCAPE_EXTENSIONS,
            default_for_string=False,
        )

    return Environment(
        loader=DictLoader(dict(sources)),
        undefined=StrictUndefined if options.strict_undefined else ChainableUndefined,
        autoescape=autoescape,
        trim_blocks=options.trim_blocks,
        lstrip_blocks=options.lstrip_blocks,
        keep_trailing_newline=True,
        auto_reload=False,
        cache_size=-1,
    )


def _syntax_error(name: str, e: TemplateSyntaxError) -> TemplateCompileError:
    return TemplateCompileError(
        ErrorCodes.TEMPLATE_SYNTAX_ERROR,
        template=name,
        line=e.lineno,
        error=e.message,
    )


def _literal_candidates(node: nodes.Node) -> list[str] | None:
    """
    참조 대상의 리터럴 후보 목록.

    include만 ["a.html", "b.html"] 형태의 후보 목록을 허용 (첫 번째로 존재하는
    템플릿 사용). extends/import는 단일 문자열만 허용. 동적이면 None.
    """
    target = node.template
    if isinstance(target, nodes.Const) and isinstance(target.value, str):
        return [target.value]
    if isinstance(node, nodes.Include) and isinstance(target, (nodes.List, nodes.Tuple)):
        candidates = []
        for item in target.items:
            if not (isinstance(item, nodes.Const) and isinstance(item.value, str)):
                return None
            candidates.append(item.value)
        return candidates
    return None


def _check_references(
    name: str,
    ast: nodes.Template,
    available: Mapping[str, str],
) -> tuple[str, ...]:
    """
    extends/include/import 대상 검증.

    Returns:
        extends로 선택되는 부모 템플릿들 (조건부 extends면 여러 개)

    Raises:
        TemplateCompileError: TEMPLATE_REFERENCE_DYNAMIC, TEMPLATE_REFERENCE_MISSING
    """
    parents: list[str] = []
    for node in ast.find_all(_REFERENCE_NODES):
        # ignore missing: 대상이 없어도 빈 출력
        if isinstance(node, nodes.Include) and node.ignore_missing:
            continue

        candidates = _literal_candidates(node)
        if candidates is None:
            raise TemplateCompileError(
                ErrorCodes.TEMPLATE_REFERENCE_DYNAMIC,
                template=name,
            )

        chosen = next((c for c in candidates if c in available), None)
        if chosen is None:
            raise TemplateCompileError(
                ErrorCodes.TEMPLATE_REFERENCE_MISSING,
                template=name,
                reference=candidates[0] if len(candidates) == 1 else candidates,
            )

        if isinstance(node, nodes.Extends) and chosen not in parents:
            parents.append(chosen)
    return tuple(parents)


def _check_inheritance_cycles(parents: Mapping[str, tuple[str, ...]]) -> None:
    """extends 그래프 순환 검사 (a → b → a, 조건부 extends 포함)."""
    for start in sorted(parents):
        pending = [[start]]
        while pending:
            chain = pending.pop()
            for parent in parents.get(chain[-1], ()):
                if parent in chain:
                    raise TemplateCompileError(
                        ErrorCodes.TEMPLATE_REFERENCE_CYCLE,
                        template=start,
                        chain=chain + [parent],
                    )
                pending.append(chain + [parent])


def compile_templates(
    sources: Mapping[str, str],
    options: TemplateOptions | None = None,
    generation: int = 0,
) -> CompiledTemplateSet:
    """
    Template Source Set 전체 컴파일.

    Args:
        sources: 템플릿 경로 → 소스 텍스트
        options: Environment 옵션
        generation: 세트 식별 번호 (reload마다 증가)

    Returns:
        CompiledTemplateSet

    Raises:
        TemplateCompileError: 문법 오류, 누락/동적/순환 참조
    """
    options = options or TemplateOptions()
    frozen = {name: sources[name] for name in sorted(sources)}
    env = build_environment(frozen, options)

    # 1. 파싱 + 참조 수집
    parents: dict[str, tuple[str, ...]] = {}
    for name, source in frozen.items():
        try:
            ast = env.parse(source, name=name)
        except TemplateSyntaxError as e:
            raise _syntax_error(name, e) from e

        parents[name] = _check_references(name, ast, frozen)

    _check_inheritance_cycles(parents)

    # 2. 코드 생성 (알 수 없는 filter/test는 여기서 TemplateAssertionError)
    compiled: dict[str, Template] = {}
    for name in frozen:
        try:
            compiled[name] = env.get_template(name)
        except TemplateSyntaxError as e:
            raise _syntax_error(name, e) from e

    logger.debug(f"Compiled {len(compiled)} templates (generation {generation})")

    return CompiledTemplateSet(
        environment=env,
        templates=MappingProxyType(compiled),
        generation=generation,
    )


# =============================================================================
# Render
# =============================================================================

def render_template(
    compiled: CompiledTemplateSet,
    name: str,
    context: Mapping[str, Any] | None = None,
) -> bytes:
    """
    컴파일된 세트에서 이름으로 렌더.

    Args:
        compiled: 컴파일된 템플릿 세트
        name: 템플릿 경로 (예: "index.html")
        context: 렌더 컨텍스트 (None이면 빈 컨텍스트)

    Returns:
        UTF-8 인코딩된 렌더 결과

    Raises:
        TemplateNotFoundError: TEMPLATE_NOT_FOUND
        TemplateRenderError: RENDER_FAILED
    """
    template = compiled.templates.get(name)
    if template is None:
        raise TemplateNotFoundError(
            ErrorCodes.TEMPLATE_NOT_FOUND,
            template=name,
        )

    try:
        rendered = template.render(dict(context or {}))
    except Exception as e:
        raise TemplateRenderError(
            ErrorCodes.RENDER_FAILED,
            template=name,
            error=str(e),
        ) from e

    return rendered.encode(OUTPUT_ENCODING)
