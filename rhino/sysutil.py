"""Process uptime, crash-log redirection and simple timing harnesses."""

from __future__ import annotations

import os
import threading
import time
from datetime import timedelta
from typing import Callable

DEFAULT_CRASH_PATH = "./crash.log"
_STDERR_FD = 2
_START = time.monotonic()


def uptime() -> timedelta:
    """Time elapsed since this module was loaded."""
    return timedelta(seconds=time.monotonic() - _START)


def redirect_stderr(path: str = DEFAULT_CRASH_PATH) -> None:
    """Append everything written to standard error to ``path``."""
    try:
        fd = os.open(path, os.O_CREAT | os.O_APPEND | os.O_RDWR, 0o660)
    except OSError as exc:
        print("#system crash catch err:", exc)
        raise
    try:
        os.dup2(fd, _STDERR_FD)
    finally:
        os.close(fd)


def _report(name: str, elapsed: timedelta, totals: int) -> timedelta:
    once = elapsed / totals
    seconds = elapsed.total_seconds()
    tps = int(totals / seconds) if seconds > 0 else 0
    print(f"[ {name} ] totals time= {elapsed} once time= {once} num= {totals} tps= {tps}")
    return elapsed


def _check(totals: int) -> None:
    if totals <= 0:
        raise ValueError("totals must be positive")


def run_parallel(name: str, n: int, totals: int, fn: Callable[[int], object]) -> timedelta:
    """Call ``fn(i)`` for ``i`` in ``range(n)`` on separate threads and report timing."""
    _check(totals)
    start = time.perf_counter()
    workers = [threading.Thread(target=fn, args=(i,)) for i in range(n)]
    for worker in workers:
        worker.start()
    for worker in workers:
        worker.join()
    return _report(name, timedelta(seconds=time.perf_counter() - start), totals)


def run_serial(name: str, n: int, totals: int, fn: Callable[[int], object]) -> timedelta:
    """Call ``fn(i)`` for ``i`` in ``range(n)`` in order and report timing."""
    _check(totals)
    start = time.perf_counter()
    for i in range(n):
        fn(i)
    return _report(name, timedelta(seconds=time.perf_counter() - start), totals)