"""
Blocking iterator over one daemon signal.

The signal handler runs on the GLib main loop thread and only enqueues;
readers block on the queue. Payloads that do not parse are dropped so a
single malformed signal never ends a verification or enrollment stream.
"""

import queue
import threading
from typing import Any, Callable, Generic, Optional, TypeVar

import dbus.exceptions

from .errors import FprintError, translate_dbus_exception
from .logging_config import get_logger

logger = get_logger(__name__)

T = TypeVar('T')

_CLOSED = object()


class SignalTimeout(FprintError):
    """No signal arrived within the requested timeout."""
    pass


class StreamClosed(FprintError):
    """The stream was closed and will deliver nothing further."""
    pass


class SignalStream(Generic[T]):
    """
    Queue-backed stream of parsed signal payloads.

    Args:
        proxy: dbus-python proxy object for the emitting device
        signal_name: D-Bus signal member name
        interface: Interface the signal belongs to
        parser: Turns the raw signal arguments into an item; any
            FprintError, TypeError or ValueError drops the payload
    """

    def __init__(
        self,
        proxy,
        signal_name: str,
        interface: str,
        parser: Callable[..., T],
    ):
        self.signal_name = signal_name
        self._parser = parser
        self._queue: "queue.Queue[Any]" = queue.Queue()
        self._lock = threading.Lock()
        self._closed = False
        self.dropped = 0

        try:
            self._match = proxy.connect_to_signal(
                signal_name, self._on_signal, dbus_interface=interface
            )
        except dbus.exceptions.DBusException as e:
            raise translate_dbus_exception(e) from e
        logger.verbose(f"Subscribed to {interface}.{signal_name}")

    def _on_signal(self, *args) -> None:
        # The GLib thread may still be dispatching after close()
        if self._closed:
            return
        logger.trace(f"{self.signal_name}{args!r}")
        try:
            item = self._parser(*args)
        except (FprintError, TypeError, ValueError) as e:
            self.dropped += 1
            logger.verbose(f"Dropped {self.signal_name} payload {args!r}: {e}")
            return
        with self._lock:
            if not self._closed:
                self._queue.put(item)

    @property
    def closed(self) -> bool:
        return self._closed

    def get(self, timeout: Optional[float] = None) -> T:
        """
        Return the next item, blocking until one arrives.

        Raises:
            SignalTimeout: timeout elapsed with nothing received
            StreamClosed: the stream has been closed
            ValueError: timeout is negative
        """
        if timeout is not None and timeout < 0:
            raise ValueError(f"timeout must be non-negative, got {timeout}")
        if self._closed and self._queue.empty():
            raise StreamClosed(f"{self.signal_name} stream is closed")
        try:
            item = self._queue.get(timeout=timeout)
        except queue.Empty:
            raise SignalTimeout(
                f"No {self.signal_name} signal within {timeout}s"
            ) from None
        if item is _CLOSED:
            # Leave the marker for any other blocked reader
            self._queue.put(_CLOSED)
            raise StreamClosed(f"{self.signal_name} stream is closed")
        return item

    def __iter__(self):
        return self

    def __next__(self) -> T:
        try:
            return self.get()
        except StreamClosed:
            raise StopIteration from None

    def close(self) -> None:
        """Unsubscribe and wake any blocked reader. Safe to call twice."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
            self._queue.put(_CLOSED)
        self._match.remove()
        logger.verbose(f"Unsubscribed from {self.signal_name}")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False

    def __repr__(self) -> str:
        state = "closed" if self._closed else "open"
        return f"<SignalStream {self.signal_name} {state}>"


__all__ = [
    'SignalStream',
    'SignalTimeout',
    'StreamClosed',
]
