import threading

import pytest

from rhino import mailbox
from rhino.mailbox import Mailbox, OverfullError
from rhino.process import UntypedBroker, UntypedStatistics, new_default_dispatcher, new_sync_dispatcher


class RecordingBroker(UntypedBroker):
    def __init__(self):
        self.log = []
        self.received = []
        self.stopped = threading.Event()

    def pre_start(self):
        self.log.append("start")

    def dispatch_message(self, data):
        self.log.append("msg")
        self.received.append(data)

    def throw_failure(self, err, body):
        self.log.append("failure")

    def post_stop(self):
        self.log.append("stop")
        self.stopped.set()


class RecordingStats(UntypedStatistics):
    def __init__(self):
        self.posted = []
        self.discarded = []

    def on_posted(self, value):
        self.posted.append(value)

    def on_discarded(self, err, value):
        self.discarded.append((err, value))


def test_nonblocking_mailbox_delivers_all():
    mb = mailbox.new(nonblocking=True)
    broker = RecordingBroker()
    mb.on_register(new_default_dispatcher(0), broker)
    mb.start()
    for _ in range(10):
        mb.post("我是谁")
    mb.close()
    assert broker.stopped.wait(2)
    assert broker.received == ["我是谁"] * 10
    assert broker.log[0] == "start"
    assert broker.log[-1] == "stop"


def test_overfull_nonblocking():
    mb = mailbox.make_buffer(1, nonblocking=True)
    stats = RecordingStats()
    mb.on_register(new_sync_dispatcher(0), RecordingBroker(), stats)
    mb.post("a")
    with pytest.raises(OverfullError):
        mb.post("b")
    assert stats.posted == ["a", "b"]
    assert len(stats.discarded) == 1
    err, value = stats.discarded[0]
    assert isinstance(err, OverfullError)
    assert value == "b"


def test_post_after_close_raises():
    mb = mailbox.new()
    stats = RecordingStats()
    mb.on_register(new_sync_dispatcher(0), RecordingBroker(), stats)
    mb.close()
    with pytest.raises(RuntimeError, match="closed"):
        mb.post(1)
    assert stats.discarded[0][1] == 1


def test_close_twice_raises():
    mb = mailbox.new()
    mb.close()
    with pytest.raises(RuntimeError, match="close of closed channel"):
        mb.close()


def test_sync_dispatcher_drains_after_close():
    mb = mailbox.new()
    broker = RecordingBroker()
    mb.on_register(new_sync_dispatcher(0), broker)
    for item in (1, 2, 3):
        mb.post(item)
    mb.close()
    mb.start()
    assert broker.received == [1, 2, 3]
    assert broker.log == ["start", "msg", "msg", "msg", "stop"]


def test_unbuffered_blocking_mailbox():
    mb = mailbox.make_buffer(0)
    broker = RecordingBroker()
    mb.on_register(new_default_dispatcher(0), broker)
    mb.start()
    for item in ("x", "y", "z"):
        mb.post(item)
    mb.close()
    assert broker.stopped.wait(2)
    assert broker.received == ["x", "y", "z"]


def test_buffer_callable_with_pending_num():
    mb = mailbox.make_buffer(1, nonblocking=True, buffer=lambda n: n * 2)
    mb.post(1)
    mb.post(2)
    with pytest.raises(OverfullError):
        mb.post(3)


def test_buffer_int_and_zero_arg_callable():
    mb = mailbox.make_buffer(5, nonblocking=True, buffer=lambda: 1)
    mb.post(1)
    with pytest.raises(OverfullError):
        mb.post(2)
    mb2 = Mailbox(nonblocking=True, buffer=0)
    with pytest.raises(OverfullError):
        mb2.post(1)


def test_buffer_bad_type():
    with pytest.raises(TypeError, match="buffer paramer error"):
        mailbox.new(buffer="x")


def test_unbounded_makes_fresh_mailboxes():
    produce = mailbox.unbounded(nonblocking=True)
    first = produce()
    second = produce()
    assert first is not second
    assert first.nonblocking is True
    assert first.pending_num == 10
    first.close()
    second.post("still open")
    second.close()