# License: MIT
# Copyright © 2026 Frequenz Energy-as-a-Service GmbH

"""Tests for the SignalRegistry."""

import logging

import pytest

from machinetwin.signals import Signal, SignalRegistry, Subscription


def test_signal_registry() -> None:
    """Test creating, typing and removing signals."""
    reg = SignalRegistry(name="test-registry")

    assert "20-hello" not in reg
    assert "21-hello" not in reg

    sig20 = reg.get_or_create(int, "20-hello")
    assert "20-hello" in reg
    assert reg.message_type("20-hello") == int
    assert sig20.name == "test-registry-20-hello"
    assert reg.get_or_create(int, "20-hello") is sig20

    with pytest.raises(ValueError):
        reg.get_or_create(str, "20-hello")

    received: list[int] = []
    subscription = sig20.subscribe(received.append)
    assert sig20.emit(30) == 1
    assert received == [30]

    reg.remove("20-hello")
    assert "20-hello" not in reg
    assert not subscription.is_active
    assert sig20.subscriber_count == 0
    assert sig20.emit(31) == 0
    assert received == [30]
    with pytest.raises(KeyError):
        reg.message_type("20-hello")
    with pytest.raises(KeyError):
        reg.remove("20-hello")


def test_delivery_to_all_subscribers() -> None:
    """Every subscriber gets every message."""
    signal: Signal[str] = Signal("test")
    first: list[str] = []
    second: list[str] = []
    signal.subscribe(first.append)
    signal.subscribe(second.append)

    assert signal.subscriber_count == 2
    assert signal.emit("a") == 2
    assert signal.emit("b") == 2
    assert first == ["a", "b"]
    assert second == ["a", "b"]


def test_unsubscribe() -> None:
    """A cancelled subscription gets no more messages."""
    signal: Signal[int] = Signal("test")
    received: list[int] = []
    subscription = signal.subscribe(received.append)

    signal.emit(1)
    subscription.unsubscribe()
    signal.emit(2)

    assert received == [1]
    assert not subscription.is_active
    assert signal.subscriber_count == 0

    # Cancelling twice is harmless
    subscription.cancel()


def test_subscription_context_manager() -> None:
    """A subscription used as a context manager is cancelled on exit."""
    signal: Signal[int] = Signal("test")
    received: list[int] = []

    with signal.subscribe(received.append) as subscription:
        signal.emit(1)
        assert subscription.is_active

    signal.emit(2)
    assert received == [1]
    assert not subscription.is_active


def test_failing_subscriber_isolated(caplog: pytest.LogCaptureFixture) -> None:
    """A subscriber raising doesn't stop the delivery to the others."""
    signal: Signal[int] = Signal("test")
    received: list[int] = []

    def fail(_: int) -> None:
        raise RuntimeError("boom")

    signal.subscribe(fail)
    signal.subscribe(received.append)

    with caplog.at_level(logging.ERROR):
        assert signal.emit(1) == 1
        assert signal.emit(2) == 1

    assert received == [1, 2]
    assert len(caplog.records) == 2
    assert all(record.exc_info is not None for record in caplog.records)
    assert "boom" in caplog.text


def test_cancel_during_emit() -> None:
    """A subscription cancelled by an earlier callback is not called."""
    signal: Signal[int] = Signal("test")
    received: list[int] = []
    subscriptions: list[Subscription[int]] = []

    def cancel_others(_: int) -> None:
        for subscription in subscriptions:
            subscription.cancel()

    signal.subscribe(cancel_others)
    subscriptions.append(signal.subscribe(received.append))

    assert signal.emit(1) == 1
    assert received == []
    assert signal.subscriber_count == 1


def test_subscribe_during_emit() -> None:
    """Subscribing during an emission takes effect from the next one."""
    signal: Signal[int] = Signal("test")
    received: list[int] = []

    def subscribe_more(_: int) -> None:
        if signal.subscriber_count == 1:
            signal.subscribe(received.append)

    signal.subscribe(subscribe_more)
    signal.emit(1)
    signal.emit(2)

    assert received == [2]


def test_repr() -> None:
    """Test the string representations."""
    signal: Signal[int] = Signal("test")
    subscription = signal.subscribe(print)

    assert repr(signal) == "Signal(name='test', subscribers=1)"
    assert repr(subscription) == f"Subscription(callback={print!r}, active=True)"
