#!/usr/bin/env python3
"""
check_templates.py - 템플릿 디렉터리 컴파일 검사 스크립트

빌드/CI 단계에서 실행:
1. templates root의 모든 .html 로드 (UTF-8)
2. 전체 컴파일 (문법 오류, 누락/동적/순환 extends·include 검사)
3. --render: 모든 템플릿을 빈 컨텍스트로 렌더

하나라도 실패하면 exit 1.

사용법:
    # default.yaml의 templates_root 검사
    uv run python scripts/check_templates.py

    # 특정 디렉터리 + 렌더까지
    uv run python scripts/check_templates.py --root src/app/templates --render

    # undefined 변수 허용
    uv run python scripts/check_templates.py --lenient
"""

import argparse
import logging
import sys
from dataclasses import dataclass, field
from pathlib import Path

# 프로젝트 루트에서 src 패키지 임포트
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from src.app.config import load_resolver_config  # noqa: E402
from src.core.assets import AssetBundle  # noqa: E402
from src.domain.constants import TEMPLATE_EXTENSIONS  # noqa: E402
from src.domain.errors import ResourceError  # noqa: E402
from src.render.engine import (  # noqa: E402
    TemplateOptions,
    compile_templates,
    load_template_sources,
    render_template,
)

# 로깅 설정
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger(__name__)


@dataclass
class CheckResult:
    """검사 결과."""
    templates: int = 0
    rendered: int = 0
    errors: list[dict] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


def check_templates(
    root: Path,
    options: TemplateOptions | None = None,
    render: bool = False,
) -> CheckResult:
    """
    템플릿 디렉터리 검사.

    Args:
        root: templates root 디렉터리
        options: 컴파일 옵션
        render: True면 모든 템플릿을 빈 컨텍스트로 렌더

    Returns:
        CheckResult (컴파일 실패 시 errors 1건, 렌더 실패는 템플릿별 누적)
    """
    result = CheckResult()

    try:
        bundle = AssetBundle.from_directory(root, TEMPLATE_EXTENSIONS)
        compiled = compile_templates(load_template_sources(bundle), options)
    except ResourceError as e:
        logger.error(f"컴파일 실패: {e}")
        result.errors.append(e.to_dict())
        return result

    result.templates = len(compiled)
    logger.info(f"컴파일 완료: {result.templates}개 템플릿")

    if not render:
        return result

    for name in compiled.names:
        try:
            render_template(compiled, name)
            result.rendered += 1
        except ResourceError as e:
            logger.error(f"렌더 실패: {e}")
            result.errors.append(e.to_dict())

    return result


def main() -> int:
    parser = argparse.ArgumentParser(
        description="템플릿 디렉터리 컴파일 검사",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "--root",
        type=str,
        help="templates 디렉터리 경로 (기본: default.yaml의 templates_root)",
    )
    parser.add_argument(
        "--config",
        type=str,
        help="설정 파일 경로 (기본: default.yaml)",
    )
    parser.add_argument(
        "--render",
        action="store_true",
        help="모든 템플릿을 빈 컨텍스트로 렌더",
    )
    parser.add_argument(
        "--lenient",
        action="store_true",
        help="undefined 변수를 빈 문자열로 치환 (기본: strict)",
    )

    args = parser.parse_args()

    config = load_resolver_config(Path(args.config) if args.config else None)
    root = Path(args.root) if args.root else config.templates_root
    options = TemplateOptions(
        strict_undefined=config.strict_undefined and not args.lenient,
        autoescape=config.autoescape,
    )

    logger.info(f"검사 대상: {root}")
    result = check_templates(root, options, render=args.render)

    logger.info("=" * 50)
    logger.info(f"템플릿: {result.templates}, 렌더: {result.rendered}, 에러: {len(result.errors)}")
    logger.info("=" * 50)

    return 0 if result.ok else 1


if __name__ == "__main__":
    sys.exit(main())
