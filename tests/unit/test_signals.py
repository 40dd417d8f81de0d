from tabula.signals import Signal


def test_emit_calls_receivers_in_order():
    calls = []
    signal = Signal("demo")
    signal.connect(lambda value: calls.append(("first", value)))
    signal.connect(lambda value: calls.append(("second", value)))
    signal.emit(3)
    assert calls == [("first", 3), ("second", 3)]


def test_connect_is_idempotent_and_returns_receiver():
    signal = Signal()
    calls = []

    @signal.connect
    def receiver(*args):
        calls.append(args)

    signal.connect(receiver)
    assert signal.receivers == 1
    signal.emit("a", "b")
    assert calls == [("a", "b")]


def test_disconnect():
    signal = Signal()
    calls = []
    signal.connect(calls.append)
    assert signal.disconnect(calls.append)
    assert not signal.disconnect(calls.append)
    signal.emit(1)
    assert calls == []


def test_receiver_may_disconnect_itself_during_emit():
    signal = Signal()
    calls = []

    def once(value):
        calls.append(value)
        signal.disconnect(once)

    signal.connect(once)
    signal.emit(1)
    signal.emit(2)
    assert calls == [1]
