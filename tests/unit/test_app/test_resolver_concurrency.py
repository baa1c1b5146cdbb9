"""
test_resolver_concurrency.py - Resolver 동시성 테스트

테스트 케이스:
- TC1: reload 없는 상태에서 N개 동시 get_template → 모두 정상 출력
- TC2: 개발 모드 동시 호출 → 교착 없이 모두 성공
- TC3: 늦게 끝난 오래된 reload는 최신 세트를 덮어쓰지 않음
- TC4: 렌더 중 reload → 렌더는 완성된 세트 하나만 관찰
"""

import os
import threading
from pathlib import Path

import pytest

from src.app.resolver import ResourceResolver, create_resolver
from src.core.assets import AssetBundle, BundleSource
from src.domain.schemas import Mode, ResolverConfig

EXPECTED = {
    "index.html": b"Hello",
    "page.html": b"<title>Page</title><nav>nav</nav><main>Body</main>",
    "partials/nav.html": b"<nav>nav</nav>",
}


def _run_threads(target, count: int) -> None:
    threads = [threading.Thread(target=target, args=(i,)) for i in range(count)]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=10)
        assert not t.is_alive(), "thread did not finish (deadlock?)"


# =============================================================================
# TC1 / TC2
# =============================================================================

class TestConcurrentRenders:
    """동시 렌더."""

    @pytest.mark.parametrize("mode", [Mode.PRODUCTION, Mode.DEVELOPMENT])
    def test_many_simultaneous_renders(self, config_factory, mode: Mode):
        resolver = ResourceResolver.from_config(config_factory(mode))
        names = sorted(EXPECTED)
        barrier = threading.Barrier(24)
        results: dict[int, bytes] = {}
        errors: list[Exception] = []

        def worker(i: int):
            name = names[i % len(names)]
            barrier.wait(timeout=5)
            try:
                for _ in range(5):
                    output = resolver.get_template(name)
                    assert output == EXPECTED[name]
                results[i] = output
            except Exception as e:  # 스레드 내부 실패 수집
                errors.append(e)

        _run_threads(worker, 24)

        assert errors == []
        assert len(results) == 24
        for i, output in results.items():
            assert output == EXPECTED[names[i % len(names)]]

    def test_static_and_templates_together(self, static_files: dict[str, bytes], template_files: dict[str, bytes]):
        resolver = create_resolver(static_files, template_files)
        errors: list[Exception] = []

        def worker(i: int):
            try:
                for _ in range(20):
                    assert resolver.get_static_asset("app.js") == b"console.log(1);"
                    assert resolver.get_template("index.html") == b"Hello"
            except Exception as e:
                errors.append(e)

        _run_threads(worker, 16)

        assert errors == []


# =============================================================================
# TC3: 오래된 reload 폐기
# =============================================================================

class BlockingSource(BundleSource):
    """block이 설정되면 load()가 release 이벤트까지 대기."""

    def __init__(self, files: dict[str, bytes]):
        self.files = files
        self.block = False
        self.entered = threading.Event()
        self.release = threading.Event()

    def load(self) -> AssetBundle:
        if self.block:
            self.block = False
            snapshot = AssetBundle(self.files)
            self.entered.set()
            self.release.wait(timeout=5)
            return snapshot
        return AssetBundle(self.files)

    def describe(self) -> str:
        return "blocking source"


class TestStaleReload:
    """generation 비교로 오래된 세트 폐기."""

    def test_older_compile_does_not_overwrite_newer(self, static_files: dict[str, bytes]):
        source = BlockingSource({"index.html": b"v1"})
        resolver = ResourceResolver(ResolverConfig(), AssetBundle(static_files), source)

        # 느린 reload (generation 2): v1 스냅샷을 잡은 채 대기
        source.block = True
        slow = threading.Thread(target=resolver.reload)
        slow.start()
        assert source.entered.wait(timeout=5)

        # 빠른 reload (generation 3): v2 설치
        source.files = {"index.html": b"v2"}
        resolver.reload()
        assert resolver.generation == 3

        source.release.set()
        slow.join(timeout=5)

        assert resolver.generation == 3
        assert resolver.get_template("index.html") == b"v2"


# =============================================================================
# TC4: 렌더 중 reload
# =============================================================================

class TestRenderDuringReload:
    """렌더는 완성된 세트 하나만 관찰."""

    def test_outputs_always_consistent(self, site_dir: Path, config_factory):
        resolver = ResourceResolver.from_config(config_factory(Mode.DEVELOPMENT))
        templates = site_dir / "templates"
        stop = threading.Event()
        errors: list[Exception] = []
        seen: set[bytes] = set()

        def writer():
            # nav.html을 원자적으로 교체 (temp → replace)
            nav = templates / "partials" / "nav.html"
            tmp = templates / "partials" / ".nav.html.tmp"
            version = 0
            while not stop.is_set():
                version = 1 - version
                tmp.write_text(f"<nav>v{version}</nav>", encoding="utf-8")
                os.replace(tmp, nav)

        def reader(i: int):
            try:
                for _ in range(30):
                    output = resolver.get_template("page.html")
                    seen.add(output)
                    assert output.startswith(b"<title>Page</title><nav>")
                    assert output.endswith(b"</nav><main>Body</main>")
            except Exception as e:
                errors.append(e)

        w = threading.Thread(target=writer)
        w.start()
        try:
            _run_threads(reader, 8)
        finally:
            stop.set()
            w.join(timeout=5)

        assert errors == []
        assert seen
