"""
App layer: Resource Resolver + FastAPI 호스팅.

역할:
- 정적 에셋 조회, 템플릿 렌더 API (resolver.py)
- default.yaml 설정 로드 (config.py)
- HTTP 라우트 매핑 (main.py)

주의: 폴더 구분
- src/app/static/ → 정적 에셋 (.js, .css, .svg, .png)
- src/app/templates/ → Jinja2 HTML
"""
