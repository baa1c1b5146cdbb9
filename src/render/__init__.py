"""
Render layer: HTML 템플릿 컴파일/렌더.

역할:
- Template Source Set → CompiledTemplateSet (참조 검증 포함)
- 이름 + 컨텍스트 → UTF-8 bytes
- Jinja2 기반
"""

from .engine import (
    CompiledTemplateSet,
    TemplateOptions,
    compile_templates,
    load_template_sources,
    render_template,
)

__all__ = [
    "CompiledTemplateSet",
    "TemplateOptions",
    "compile_templates",
    "load_template_sources",
    "render_template",
]
