"""
Resource Resolver: 정적 에셋 조회 + 템플릿 렌더.

규칙:
- 정적 에셋: 불변 번들 직접 조회, 락 없음
- 템플릿: 현재 CompiledTemplateSet을 read 권한으로 렌더
- 개발 모드: 매 get_template 전 전체 reload (copy-on-write)
    1. 락 없이 소스 로드 + 컴파일
    2. write 권한은 참조 교체에만 사용
    3. 늦게 시작한 세트가 이미 설치돼 있으면 교체하지 않음 (generation 비교)
- 프로덕션: 생성 시 1회 컴파일
- 생성 시 컴파일 실패 → ResolverInitError (fatal)
- reload 실패 → ReloadFailurePolicy에 따라 요청 실패 또는 마지막 정상 세트 사용
  (어느 쪽이든 마지막 정상 세트는 유지됨)
"""

import logging
import threading
import time

from src.core.assets import (
    AssetBundle,
    BundleSource,
    DirectoryBundleSource,
    FrozenBundleSource,
)
from src.core.rwlock import ReadWriteLock
from src.domain.constants import STATIC_EXTENSIONS, TEMPLATE_EXTENSIONS
from src.domain.errors import (
    ErrorCodes,
    ResolverInitError,
    ResourceError,
    TemplateCompileError,
)
from src.domain.schemas import Mode, ReloadFailurePolicy, ResolverConfig
from src.render.engine import (
    CompiledTemplateSet,
    TemplateOptions,
    compile_templates,
    load_template_sources,
    render_template,
)

logger = logging.getLogger(__name__)


class ResourceResolver:
    """
    호스팅 웹 레이어에 노출되는 조회/렌더 API.

    Usage:
        resolver = ResourceResolver.from_config(config)
        resolver.get_static_asset("scripts/app.js")  # bytes | None
        resolver.get_template("index.html")          # bytes

    렌더 컨텍스트는 항상 비어 있음. 동적 데이터가 필요하면 호출 측에서
    별도 레이어를 둘 것.
    """

    def __init__(
        self,
        config: ResolverConfig,
        static_assets: AssetBundle,
        templates: BundleSource,
    ):
        """
        Args:
            config: mode, 템플릿 옵션, reload 실패 정책
            static_assets: 정적 에셋 번들
            templates: 템플릿 번들 소스 (reload 때마다 load())

        Raises:
            ResolverInitError: RESOLVER_INIT_FAILED (초기 컴파일 실패)
        """
        self.config = config
        self._static = static_assets
        self._templates = templates
        self._options = TemplateOptions(
            strict_undefined=config.strict_undefined,
            autoescape=config.autoescape,
        )

        self._lock = ReadWriteLock()
        self._generation_lock = threading.Lock()
        self._last_generation = 0

        try:
            compiled = self._compile()
        except TemplateCompileError as e:
            logger.exception(f"Initial template compile failed: {e}")
            raise ResolverInitError(
                ErrorCodes.RESOLVER_INIT_FAILED,
                templates=templates.describe(),
                cause=e.to_dict(),
            ) from e

        self._compiled: CompiledTemplateSet = compiled
        logger.info(
            f"Resource resolver ready: mode={config.mode.value}, "
            f"assets={len(static_assets)}, templates={len(compiled)}"
        )

    @classmethod
    def from_config(cls, config: ResolverConfig) -> "ResourceResolver":
        """
        설정된 root 디렉터리로 Resolver 생성.

        - 정적 에셋: 항상 시작 시 스냅샷
        - 템플릿: 프로덕션은 스냅샷, 개발은 디렉터리 재탐색

        Raises:
            ResolverInitError: 번들 root 없음 또는 초기 컴파일 실패
        """
        try:
            static_assets = AssetBundle.from_directory(
                config.static_root, STATIC_EXTENSIONS
            )
            source = DirectoryBundleSource(config.templates_root, TEMPLATE_EXTENSIONS)
            templates: BundleSource = (
                source if config.mode is Mode.DEVELOPMENT else source.freeze()
            )
        except ResourceError as e:
            raise ResolverInitError(
                ErrorCodes.RESOLVER_INIT_FAILED,
                cause=e.to_dict(),
            ) from e

        return cls(config, static_assets, templates)

    # =========================================================================
    # Properties
    # =========================================================================

    @property
    def mode(self) -> Mode:
        return self.config.mode

    @property
    def generation(self) -> int:
        with self._lock.read():
            return self._compiled.generation

    def template_names(self) -> tuple[str, ...]:
        with self._lock.read():
            return self._compiled.names

    def static_paths(self) -> tuple[str, ...]:
        return tuple(self._static)

    # =========================================================================
    # Static Assets
    # =========================================================================

    def get_static_asset(self, path: str) -> bytes | None:
        """
        정적 에셋 조회 (락 없음).

        Returns:
            번들에 포함된 bytes, 없으면 None
        """
        data = self._static.get(path)
        if data is None:
            logger.debug(f"Static asset not found: {path}")
        return data

    # =========================================================================
    # Templates
    # =========================================================================

    def get_template(self, path: str) -> bytes:
        """
        템플릿을 빈 컨텍스트로 렌더.

        Raises:
            TemplateCompileError: 개발 모드 reload 실패 (FAIL_REQUEST 정책)
            TemplateNotFoundError: TEMPLATE_NOT_FOUND
            TemplateRenderError: RENDER_FAILED
        """
        if self.config.mode is Mode.DEVELOPMENT:
            self.reload()

        with self._lock.read():
            compiled = self._compiled
            logger.debug(f"Rendering {path} (generation {compiled.generation})")
            return render_template(compiled, path)

    def reload(self) -> CompiledTemplateSet:
        """
        템플릿 소스 재로드 + 전체 재컴파일 후 교체.

        Returns:
            교체 후 현재 설치된 세트

        Raises:
            TemplateCompileError: FAIL_REQUEST 정책에서 컴파일 실패
        """
        started = time.perf_counter()
        try:
            compiled = self._compile()
        except TemplateCompileError as e:
            return self._handle_reload_failure(e)

        with self._lock.write():
            current = self._compiled
            if compiled.generation > current.generation:
                self._compiled = compiled
                current = compiled
                swapped = True
            else:
                swapped = False

        elapsed_ms = (time.perf_counter() - started) * 1000
        if swapped:
            logger.info(
                f"Templates reloaded: generation={compiled.generation}, "
                f"templates={len(compiled)}, {elapsed_ms:.1f}ms"
            )
        else:
            logger.debug(
                f"Discarded stale reload generation {compiled.generation} "
                f"(installed: {current.generation})"
            )
        return current

    def _handle_reload_failure(self, error: TemplateCompileError) -> CompiledTemplateSet:
        policy = self.config.reload_failure_policy
        if policy is ReloadFailurePolicy.SERVE_LAST_GOOD:
            with self._lock.read():
                current = self._compiled
            logger.warning(
                f"Template reload failed, serving generation {current.generation}: {error}"
            )
            return current

        logger.error(f"Template reload failed: {error}")
        raise error

    def _next_generation(self) -> int:
        with self._generation_lock:
            self._last_generation += 1
            return self._last_generation

    def _compile(self) -> CompiledTemplateSet:
        """소스 로드 + 컴파일 (락 없이 실행)."""
        generation = self._next_generation()
        try:
            bundle = self._templates.load()
        except ResourceError as e:
            raise TemplateCompileError(
                ErrorCodes.TEMPLATE_SOURCE_UNAVAILABLE,
                source=self._templates.describe(),
                error=str(e),
            ) from e

        sources = load_template_sources(bundle)
        return compile_templates(sources, self._options, generation=generation)


def create_resolver(
    static_files: dict[str, bytes],
    template_files: dict[str, bytes],
    config: ResolverConfig | None = None,
) -> ResourceResolver:
    """
    메모리 내 파일 dict로 Resolver 생성 (간편 함수).

    Args:
        static_files: 정적 에셋 경로 → bytes
        template_files: 템플릿 경로 → bytes
        config: 설정 (None이면 프로덕션 기본값)
    """
    return ResourceResolver(
        config or ResolverConfig(),
        AssetBundle(static_files),
        FrozenBundleSource(AssetBundle(template_files)),
    )
