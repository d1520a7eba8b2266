# License: MIT
# Copyright © 2026 Frequenz Energy-as-a-Service GmbH

"""A registry that creates, owns and provides access to named signals."""

import dataclasses
import logging
import traceback
from collections.abc import Callable
from types import TracebackType
from typing import Generic, Self, TypeVar, cast

_T = TypeVar("_T")
_logger = logging.getLogger(__name__)


class Subscription(Generic[_T]):
    """A handle to a callback subscribed to a [`Signal`][machinetwin.signals.Signal].

    Cancelling the subscription guarantees the callback is not called again, even
    if the signal is being emitted at that moment.

    Subscriptions can be used as context managers, they are cancelled on exit:

    ```python
    with context.subscribe(SignalKey.VALUES_CHANGED, print):
        await asyncio.sleep(10)
    ```
    """

    def __init__(self, signal: "Signal[_T]", callback: Callable[[_T], object]) -> None:
        """Initialize this instance.

        Args:
            signal: The signal the callback is subscribed to.
            callback: The callback.
        """
        self._signal: Signal[_T] | None = signal
        self._callback = callback

    @property
    def callback(self) -> Callable[[_T], object]:
        """The subscribed callback."""
        return self._callback

    @property
    def is_active(self) -> bool:
        """Whether the callback still receives messages."""
        return self._signal is not None

    def cancel(self) -> None:
        """Stop delivering messages to the callback.

        Cancelling an already cancelled subscription does nothing.
        """
        if self._signal is None:
            return
        # pylint: disable-next=protected-access
        self._signal._detach(self)
        self._signal = None

    unsubscribe = cancel

    def __enter__(self) -> Self:
        """Enter a context, the subscription is already active."""
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Exit the context, cancelling the subscription."""
        self.cancel()

    def __repr__(self) -> str:
        """Return a string representation of this subscription."""
        return (
            f"{type(self).__name__}(callback={self._callback!r}, "
            f"active={self.is_active})"
        )


class Signal(Generic[_T]):
    """A named notification delivered synchronously to subscribed callbacks.

    A callback raising an exception doesn't affect the emitter nor the delivery
    to the other callbacks, the exception is only logged.

    No delivery order between subscribers is promised.
    """

    def __init__(self, name: str) -> None:
        """Initialize this signal.

        Args:
            name: The name of the signal, used in the logs.
        """
        self._name = name
        self._subscriptions: dict[int, Subscription[_T]] = {}

    @property
    def name(self) -> str:
        """The name of this signal."""
        return self._name

    @property
    def subscriber_count(self) -> int:
        """The number of active subscriptions."""
        return len(self._subscriptions)

    def subscribe(self, callback: Callable[[_T], object]) -> Subscription[_T]:
        """Subscribe a callback to this signal.

        Subscribing during an emission takes effect from the next emission.

        Args:
            callback: The callback to call with every emitted message.

        Returns:
            The subscription handle, to be cancelled when the messages are not
                needed anymore.
        """
        subscription = Subscription(self, callback)
        self._subscriptions[id(subscription)] = subscription
        _logger.debug("Signal %s: subscribed %r", self._name, callback)
        return subscription

    def emit(self, message: _T) -> int:
        """Deliver a message to all subscribed callbacks.

        Args:
            message: The message to deliver.

        Returns:
            The number of callbacks that returned without raising.
        """
        delivered = 0
        for subscription in list(self._subscriptions.values()):
            # It might have been cancelled by a previous callback
            if not subscription.is_active:
                continue
            try:
                subscription.callback(message)
            except Exception:  # pylint: disable=broad-except
                _logger.exception(
                    "Signal %s: subscriber %r failed", self._name, subscription.callback
                )
            else:
                delivered += 1
        return delivered

    def clear(self) -> None:
        """Cancel all subscriptions."""
        for subscription in list(self._subscriptions.values()):
            subscription.cancel()

    def _detach(self, subscription: Subscription[_T]) -> None:
        self._subscriptions.pop(id(subscription), None)
        _logger.debug("Signal %s: unsubscribed %r", self._name, subscription.callback)

    def __repr__(self) -> str:
        """Return a string representation of this signal."""
        return (
            f"{type(self).__name__}(name={self._name!r}, "
            f"subscribers={self.subscriber_count})"
        )


class SignalRegistry:
    """Dynamically creates, owns and provides access to signals.

    Signals are created when they are first requested via
    [`get_or_create()`][machinetwin.signals.SignalRegistry.get_or_create].

    The registry also stores type information to make sure that the same signal is
    not used for different message types.
    """

    def __init__(self, *, name: str) -> None:
        """Initialize this registry.

        Args:
            name: A name to identify the registry in the logs. This name is also used
                as a prefix for the signal names.
        """
        self._name = name
        self._signals: dict[str, _Entry] = {}

    @property
    def name(self) -> str:
        """The name of this registry."""
        return self._name

    def message_type(self, key: str) -> type:
        """Get the message type of the signal for the given key.

        Args:
            key: The key to identify the signal.

        Returns:
            The message type of the signal.

        Raises:
            KeyError: If the signal does not exist.
        """
        entry = self._signals.get(key)
        if entry is None:
            raise KeyError(f"No signal for key {key!r} exists.")
        return entry.message_type

    def __contains__(self, key: str) -> bool:
        """Check whether the signal for the given `key` exists."""
        return key in self._signals

    def get_or_create(self, message_type: type[_T], key: str) -> Signal[_T]:
        """Get or create a signal for the given key.

        Note:
            The types have to match exactly, it doesn't do a subtype check.

        Args:
            message_type: The type of the messages emitted through the signal.
            key: The key to identify the signal.

        Returns:
            The signal for the given key.

        Raises:
            ValueError: If the signal exists and the message type does not match.
        """
        if key not in self._signals:
            if _logger.isEnabledFor(logging.DEBUG):
                _logger.debug(
                    "Creating a new signal for key %r with type %s at:\n%s",
                    key,
                    message_type,
                    "".join(traceback.format_stack(limit=10)[:9]),
                )
            self._signals[key] = _Entry(message_type, Signal(f"{self._name}-{key}"))

        entry = self._signals[key]
        if entry.message_type is not message_type:
            raise ValueError(
                f"Type mismatch, a signal for key {key!r} exists and the requested "
                f"message type {message_type} is not the same as the existing "
                f"message type {entry.message_type}."
            )

        return cast(Signal[_T], entry.signal)

    def remove(self, key: str) -> None:
        """Remove the signal for the given key, cancelling all its subscriptions.

        Args:
            key: The key to identify the signal.

        Raises:
            KeyError: If the signal does not exist.
        """
        entry = self._signals.pop(key, None)
        if entry is None:
            raise KeyError(f"No signal for key {key!r} exists.")
        entry.signal.clear()


@dataclasses.dataclass(frozen=True)
class _Entry:
    """An entry in a signal registry."""

    message_type: type
    """The type of the messages emitted through the signal in this entry."""

    signal: Signal[object]
    """The signal in this entry."""
