"""
FastAPI 애플리케이션 진입점 (ResourceResolver 호스팅).

실행:
- 개발: uv run uvicorn src.app.main:create_app --factory --reload
- 프로덕션: uv run python -m src.app.main

라우트:
- GET /health
- GET /static/{path} → 정적 에셋 (없으면 404)
- GET /              → index.html
- GET /{path}        → 템플릿 렌더
"""

import logging
import mimetypes
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import HTMLResponse, Response

from src.app.config import load_resolver_config, load_server_settings
from src.app.resolver import ResourceResolver
from src.domain.constants import INDEX_TEMPLATE
from src.domain.errors import (
    TemplateCompileError,
    TemplateNotFoundError,
    TemplateRenderError,
)
from src.domain.schemas import ResolverConfig

logger = logging.getLogger(__name__)

DEFAULT_MEDIA_TYPE = "application/octet-stream"


def guess_media_type(path: str) -> str:
    """확장자 기반 Content-Type (판단은 호스팅 레이어 몫)."""
    media_type, _ = mimetypes.guess_type(path)
    return media_type or DEFAULT_MEDIA_TYPE


def _get_resolver(request: Request) -> ResourceResolver:
    resolver: ResourceResolver = request.app.state.resolver
    return resolver


def _render(resolver: ResourceResolver, path: str) -> HTMLResponse:
    try:
        content = resolver.get_template(path)
    except TemplateNotFoundError as e:
        raise HTTPException(status_code=404, detail=e.to_dict()) from e
    except (TemplateCompileError, TemplateRenderError) as e:
        logger.error(f"Template {path} failed: {e}")
        raise HTTPException(status_code=500, detail=e.to_dict()) from e
    return HTMLResponse(content=content)


# =============================================================================
# App Factory
# =============================================================================


def create_app(
    config: ResolverConfig | None = None,
    resolver: ResourceResolver | None = None,
) -> FastAPI:
    """
    FastAPI 앱 생성.

    Args:
        config: Resolver 설정 (None이면 default.yaml)
        resolver: 주입할 Resolver (테스트용, 주어지면 config 무시)
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """
        애플리케이션 생명주기 관리.

        시작 시: Resolver 생성 (컴파일 실패 시 기동 중단)
        """
        if resolver is not None:
            app.state.resolver = resolver
        else:
            app.state.resolver = ResourceResolver.from_config(
                config or load_resolver_config()
            )
        yield

    app = FastAPI(
        title="Site Resources",
        description="Embedded static assets and server-rendered templates",
        version="0.1.0",
        lifespan=lifespan,
    )

    @app.get("/health")
    def health(request: Request) -> dict[str, Any]:
        """헬스 체크."""
        res = _get_resolver(request)
        return {
            "status": "ok",
            "mode": res.mode.value,
            "generation": res.generation,
        }

    @app.get("/static/{path:path}")
    def static_asset(path: str, request: Request) -> Response:
        """정적 에셋."""
        data = _get_resolver(request).get_static_asset(path)
        if data is None:
            raise HTTPException(status_code=404, detail={"path": path})
        return Response(content=data, media_type=guess_media_type(path))

    @app.get("/", response_class=HTMLResponse)
    def index(request: Request) -> HTMLResponse:
        """홈 페이지."""
        return _render(_get_resolver(request), INDEX_TEMPLATE)

    @app.get("/{path:path}", response_class=HTMLResponse)
    def page(path: str, request: Request) -> HTMLResponse:
        """템플릿 페이지."""
        return _render(_get_resolver(request), path)

    return app


# =============================================================================
# CLI Entry Point
# =============================================================================

if __name__ == "__main__":
    import uvicorn

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    host, port = load_server_settings()
    uvicorn.run(
        "src.app.main:create_app",
        factory=True,
        host=host,
        port=port,
    )
