"""
Pytest fixtures for the resource resolver tests.

구성:
- 메모리 내 번들 (static_files, template_files)
- tmp_path 기반 사이트 디렉터리 (static/, templates/)
"""

from pathlib import Path

import pytest

from src.domain.schemas import Mode, ReloadFailurePolicy, ResolverConfig

# 1x1 투명 PNG
PNG_BYTES = (
    b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR\x00\x00\x00\x01\x00\x00\x00\x01"
    b"\x08\x06\x00\x00\x00\x1f\x15\xc4\x89\x00\x00\x00\rIDATx\x9cc\xf8\x0f"
    b"\x00\x00\x01\x01\x00\x05\x18\xd8N\x00\x00\x00\x00IEND\xaeB`\x82"
)


def write_files(root: Path, files: dict[str, bytes]) -> None:
    """상대 경로 → bytes를 root 아래에 기록."""
    for rel_path, data in files.items():
        path = root / rel_path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)


# =============================================================================
# Path Fixtures
# =============================================================================

@pytest.fixture
def project_root() -> Path:
    """프로젝트 루트 경로."""
    return Path(__file__).parent.parent


# =============================================================================
# Bundle Fixtures
# =============================================================================

@pytest.fixture
def static_files() -> dict[str, bytes]:
    """정적 에셋 번들 내용."""
    return {
        "app.js": b"console.log(1);",
        "css/site.css": b"body { margin: 0; }\n",
        "images/logo.svg": b'<svg xmlns="http://www.w3.org/2000/svg"/>',
        "images/pixel.png": PNG_BYTES,
    }


@pytest.fixture
def template_files() -> dict[str, bytes]:
    """
    템플릿 번들 내용.

    - index.html: 단순 텍스트
    - base.html / page.html: extends
    - partials/nav.html: include 대상
    """
    return {
        "index.html": b"Hello",
        "base.html": (
            b"<title>{% block title %}Site{% endblock %}</title>"
            b"{% include \"partials/nav.html\" %}"
            b"<main>{% block content %}{% endblock %}</main>"
        ),
        "page.html": (
            b'{% extends "base.html" %}'
            b"{% block title %}Page{% endblock %}"
            b"{% block content %}Body{% endblock %}"
        ),
        "partials/nav.html": b"<nav>nav</nav>",
    }


@pytest.fixture
def site_dir(
    tmp_path: Path,
    static_files: dict[str, bytes],
    template_files: dict[str, bytes],
) -> Path:
    """
    static/ + templates/ 디렉터리.

    허용 목록 밖 파일 (app.ts, notes.txt, .hidden.js) 포함.
    """
    site = tmp_path / "site"
    write_files(site / "static", static_files)
    write_files(
        site / "static",
        {
            "app.ts": b"const x: number = 1;",
            "notes.txt": b"not bundled",
            ".hidden.js": b"hidden",
        },
    )
    write_files(site / "templates", template_files)
    write_files(site / "templates", {"README.md": b"not a template"})
    return site


def make_config(site: Path, mode: Mode = Mode.PRODUCTION, **overrides) -> ResolverConfig:
    """site 디렉터리 기준 ResolverConfig."""
    values = {
        "mode": mode,
        "static_root": site / "static",
        "templates_root": site / "templates",
        "strict_undefined": True,
        "autoescape": True,
        "reload_failure_policy": ReloadFailurePolicy.FAIL_REQUEST,
    }
    values.update(overrides)
    return ResolverConfig(**values)


@pytest.fixture
def config_factory(site_dir: Path):
    """site_dir 기준 ResolverConfig 생성 함수."""
    def _factory(mode: Mode = Mode.PRODUCTION, **overrides) -> ResolverConfig:
        return make_config(site_dir, mode, **overrides)
    return _factory


@pytest.fixture
def production_config(site_dir: Path) -> ResolverConfig:
    return make_config(site_dir, Mode.PRODUCTION)


@pytest.fixture
def development_config(site_dir: Path) -> ResolverConfig:
    return make_config(site_dir, Mode.DEVELOPMENT)
