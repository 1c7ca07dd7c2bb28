"""
Bus connection and main loop helpers.

dbus-python delivers signals through a GLib main loop. Method calls work
without one, but SignalStream only receives anything while a loop is
running, either the application's own or a MainLoopThread.
"""

import logging
import threading
from typing import Optional

import dbus
import dbus.exceptions
import dbus.mainloop.glib

from .errors import TransportError, translate_dbus_exception

# Optional import with graceful fallback
try:
    from gi.repository import GLib
    GLIB_AVAILABLE = True
except ImportError:
    GLIB_AVAILABLE = False

logger = logging.getLogger(__name__)

_mainloop_lock = threading.Lock()
_mainloop_installed = False


def install_mainloop() -> None:
    """Make GLib the default main loop for new dbus-python connections."""
    global _mainloop_installed
    with _mainloop_lock:
        if _mainloop_installed:
            return
        dbus.mainloop.glib.DBusGMainLoop(set_as_default=True)
        _mainloop_installed = True
        logger.debug("Installed GLib main loop integration for dbus-python")


def get_bus(bus_type: str = "system") -> dbus.Bus:
    """
    Connect to the system or session bus.

    The session bus is only useful against a test daemon; the real one
    always lives on the system bus.
    """
    install_mainloop()
    try:
        if bus_type == "session":
            return dbus.SessionBus()
        return dbus.SystemBus()
    except dbus.exceptions.DBusException as e:
        raise translate_dbus_exception(e) from e


class MainLoopThread:
    """
    Runs a GLib main loop in a background thread.

    Usage:
        with MainLoopThread():
            for status, done in device.receive_verify_status():
                ...
    """

    def __init__(self, name: str = "fprint-mainloop"):
        self.name = name
        self._loop = None
        self._thread: Optional[threading.Thread] = None

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if not GLIB_AVAILABLE:
            raise TransportError(
                "PyGObject is required to receive fingerprint daemon signals"
            )
        if self.is_running:
            return

        install_mainloop()
        self._loop = GLib.MainLoop()
        self._thread = threading.Thread(target=self._loop.run, name=self.name, daemon=True)
        self._thread.start()
        logger.debug(f"Started main loop thread {self.name}")

    def stop(self, timeout: float = 5.0) -> None:
        if self._loop is None:
            return
        # quit() before run() starts would be lost; an idle callback is not
        GLib.idle_add(self._loop.quit)
        if self._thread is not None:
            self._thread.join(timeout)
            if self._thread.is_alive():
                logger.warning(f"Main loop thread {self.name} did not stop within {timeout}s")
        self._loop = None
        self._thread = None
        logger.debug(f"Stopped main loop thread {self.name}")

    def __enter__(self):
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.stop()
        return False


__all__ = [
    'GLIB_AVAILABLE',
    'install_mainloop',
    'get_bus',
    'MainLoopThread',
]
