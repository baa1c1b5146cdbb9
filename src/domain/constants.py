"""
Domain Constants: 리소스 해석 전역 상수.

확장자 허용 목록, 기본 경로, 설정 키 등 시스템 전반에서 사용되는 값들.
"""

from pathlib import Path

# =============================================================================
# Extension Allowlists (번들 포함 확장자)
# =============================================================================
# 정적 에셋: 스크립트, 스타일, 벡터/래스터 이미지
# 템플릿: HTML만

STATIC_EXTENSIONS = (".js", ".css", ".svg", ".png")
TEMPLATE_EXTENSIONS = (".html",)

# =============================================================================
# Default Directory Structure (기본 디렉토리 구조)
# =============================================================================
# src/app/
# ├── static/      # 정적 에셋 (.js, .css, .svg, .png)
# └── templates/   # 서버 렌더 HTML (.html)

APP_DIR = Path(__file__).resolve().parent.parent / "app"
DEFAULT_STATIC_ROOT = APP_DIR / "static"
DEFAULT_TEMPLATES_ROOT = APP_DIR / "templates"

# =============================================================================
# Configuration (설정)
# =============================================================================

CONFIG_FILENAME = "default.yaml"
CONFIG_ENV_VAR = "SITE_RESOURCES_CONFIG"
CONFIG_SECTION_RESOURCES = "resources"
CONFIG_SECTION_SERVER = "server"

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8000

# =============================================================================
# Rendering
# =============================================================================

INDEX_TEMPLATE = "index.html"
AUTOESCAPE_EXTENSIONS = ("html", "htm", "xml")
OUTPUT_ENCODING = "utf-8"
