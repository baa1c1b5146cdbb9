"""
Reader-writer lock: 다수 reader 또는 단일 writer.

규칙:
- 렌더: read 권한 (동시 다수 허용)
- reload 교체: write 권한 (배타적)
- writer 대기 중이면 신규 reader는 대기 (reload 기아 방지)
- 모든 종료 경로에서 권한 해제 (컨텍스트 매니저)
"""

import threading
from collections.abc import Generator
from contextlib import contextmanager


class ReadWriteLock:
    """
    Writer 우선 reader-writer lock.

    Usage:
        lock = ReadWriteLock()
        with lock.read():
            ...
        with lock.write():
            ...

    재진입 불가: read 권한을 가진 스레드가 write를 요청하면 교착.
    """

    def __init__(self) -> None:
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._writers_waiting = 0

    # =========================================================================
    # Read
    # =========================================================================

    def acquire_read(self) -> None:
        with self._cond:
            while self._writer or self._writers_waiting:
                self._cond.wait()
            self._readers += 1

    def release_read(self) -> None:
        with self._cond:
            if self._readers <= 0:
                raise RuntimeError("release_read() without a held read permit")
            self._readers -= 1
            if self._readers == 0:
                self._cond.notify_all()

    @contextmanager
    def read(self) -> Generator[None, None, None]:
        """공유 read 권한."""
        self.acquire_read()
        try:
            yield
        finally:
            self.release_read()

    # =========================================================================
    # Write
    # =========================================================================

    def acquire_write(self) -> None:
        with self._cond:
            self._writers_waiting += 1
            try:
                while self._writer or self._readers:
                    self._cond.wait()
            finally:
                self._writers_waiting -= 1
            self._writer = True

    def release_write(self) -> None:
        with self._cond:
            if not self._writer:
                raise RuntimeError("release_write() without a held write permit")
            self._writer = False
            self._cond.notify_all()

    @contextmanager
    def write(self) -> Generator[None, None, None]:
        """배타적 write 권한."""
        self.acquire_write()
        try:
            yield
        finally:
            self.release_write()

    # =========================================================================
    # Introspection (테스트/로그용)
    # =========================================================================

    @property
    def readers(self) -> int:
        with self._cond:
            return self._readers

    @property
    def write_locked(self) -> bool:
        with self._cond:
            return self._writer
