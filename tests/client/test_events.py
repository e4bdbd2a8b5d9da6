import pytest

from ntrip.client.events import ClientEvent, EventChannel


def test_listeners_called_in_order_with_arguments() -> None:
    channel = EventChannel()
    calls: list[tuple[str, bytes]] = []
    channel.subscribe(ClientEvent.DATA, lambda chunk: calls.append(("first", chunk)))
    channel.subscribe(ClientEvent.DATA, lambda chunk: calls.append(("second", chunk)))

    channel.emit(ClientEvent.DATA, b"abc")
    channel.emit(ClientEvent.ERROR, RuntimeError("not listened to"))

    assert calls == [("first", b"abc"), ("second", b"abc")]


def test_unsubscribe_removes_one_registration() -> None:
    channel = EventChannel()
    calls: list[None] = []

    def listener() -> None:
        calls.append(None)

    channel.subscribe(ClientEvent.CLOSE, listener)
    channel.subscribe(ClientEvent.CLOSE, listener)
    channel.unsubscribe(ClientEvent.CLOSE, listener)
    channel.emit(ClientEvent.CLOSE)

    assert len(calls) == 1


def test_unsubscribe_unknown_listener() -> None:
    with pytest.raises(ValueError):
        EventChannel().unsubscribe(ClientEvent.DATA, print)


def test_subscribing_during_emit_applies_next_time() -> None:
    channel = EventChannel()
    calls: list[str] = []

    def late() -> None:
        calls.append("late")

    def early() -> None:
        calls.append("early")
        channel.subscribe(ClientEvent.CLOSE, late)

    channel.subscribe(ClientEvent.CLOSE, early)
    channel.emit(ClientEvent.CLOSE)
    assert calls == ["early"]

    channel.emit(ClientEvent.CLOSE)
    assert calls == ["early", "early", "late"]

