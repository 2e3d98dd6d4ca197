import os
import threading
from datetime import timedelta

import pytest

from rhino import sysutil


def test_uptime_grows():
    first = sysutil.uptime()
    second = sysutil.uptime()
    assert timedelta(0) <= first <= second


def test_redirect_stderr_appends(tmp_path):
    target = tmp_path / "crash.log"
    target.write_bytes(b"old\n")
    saved = os.dup(2)
    try:
        sysutil.redirect_stderr(str(target))
        os.write(2, b"boom\n")
    finally:
        os.dup2(saved, 2)
        os.close(saved)
    assert target.read_bytes() == b"old\nboom\n"


def test_redirect_stderr_bad_path(tmp_path):
    with pytest.raises(OSError):
        sysutil.redirect_stderr(str(tmp_path / "missing" / "crash.log"))


def test_run_parallel_calls_every_index(capsys):
    seen = set()
    lock = threading.Lock()

    def work(i):
        with lock:
            seen.add(i)

    elapsed = sysutil.run_parallel("bench", 8, 8, work)
    assert seen == set(range(8))
    assert elapsed >= timedelta(0)
    assert "[ bench ]" in capsys.readouterr().out


def test_run_serial_in_order(capsys):
    seen = []
    sysutil.run_serial("serial", 5, 5, seen.append)
    assert seen == list(range(5))
    assert "num= 5" in capsys.readouterr().out


def test_zero_totals_rejected():
    with pytest.raises(ValueError):
        sysutil.run_serial("x", 1, 0, lambda i: None)