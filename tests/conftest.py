"""
Pytest configuration and shared fixtures for fingerprint_reader tests.

The fake bus stands in for a dbus-python connection: it hands out proxies
that record every method call and replay canned replies, so the tests
check member names and payload shapes without a running daemon.
"""

import os
import sys
from typing import Any, Callable, Dict, List, Optional, Tuple

import dbus
import dbus.exceptions
import pytest

# Add the parent directory to the path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from fingerprint_reader.config import ClientConfig
from fingerprint_reader.constants import Interfaces
from fingerprint_reader.device import Device
from fingerprint_reader.manager import Manager


DEVICE_PATH = "/net/reactivated/Fprint/Device/0"
SECOND_DEVICE_PATH = "/net/reactivated/Fprint/Device/1"


# ===========================================================================
# Fake dbus-python objects
# ===========================================================================

class FakeSignalMatch:
    """Stands in for dbus.connection.SignalMatch."""

    def __init__(self, proxy: 'FakeProxy', signal_name: str, handler: Callable):
        self.proxy = proxy
        self.signal_name = signal_name
        self.handler = handler
        self.removed = False

    def remove(self):
        self.removed = True
        self.proxy.matches.remove(self)


class FakeProxy:
    """
    Records calls made through get_dbus_method() and answers from `replies`.

    replies maps (interface, member) to either a value, an exception
    instance to raise, or a callable receiving the call arguments.
    """

    def __init__(self, bus: 'FakeBus', bus_name: str, object_path: str):
        self.bus = bus
        self.bus_name = bus_name
        self.object_path = object_path
        self.matches: List[FakeSignalMatch] = []

    def get_dbus_method(self, member: str, dbus_interface: Optional[str] = None):
        def method(*args, **kwargs):
            self.bus.calls.append(
                (self.object_path, dbus_interface, member, args, kwargs)
            )
            reply = self.bus.replies.get((self.object_path, dbus_interface, member))
            if reply is None:
                reply = self.bus.replies.get((dbus_interface, member))
            if isinstance(reply, BaseException):
                raise reply
            if callable(reply):
                return reply(*args)
            return reply
        return method

    def connect_to_signal(self, signal_name: str, handler: Callable,
                          dbus_interface: Optional[str] = None, **keywords):
        self.bus.subscriptions.append((self.object_path, dbus_interface, signal_name))
        match = FakeSignalMatch(self, signal_name, handler)
        self.matches.append(match)
        return match

    def emit(self, signal_name: str, *args):
        """Deliver a signal to every live handler, as the main loop would."""
        for match in list(self.matches):
            if match.signal_name == signal_name:
                match.handler(*args)


class FakeBus:
    """Minimal stand-in for dbus.SystemBus()."""

    def __init__(self):
        self.calls: List[Tuple[str, Optional[str], str, tuple, Dict[str, Any]]] = []
        self.replies: Dict[tuple, Any] = {}
        self.subscriptions: List[Tuple[str, Optional[str], str]] = []
        self.proxies: Dict[str, FakeProxy] = {}
        self.get_object_error: Optional[BaseException] = None

    def get_object(self, bus_name: str, object_path: str, introspect: bool = True):
        if self.get_object_error is not None:
            raise self.get_object_error
        if object_path not in self.proxies:
            self.proxies[object_path] = FakeProxy(self, bus_name, str(object_path))
        return self.proxies[object_path]

    def calls_to(self, member: str) -> List[tuple]:
        return [c for c in self.calls if c[2] == member]


def dbus_error(name: str, message: str = "") -> dbus.exceptions.DBusException:
    """Build a DBusException as dbus-python raises it for an error reply."""
    return dbus.exceptions.DBusException(message, name=name)


# ===========================================================================
# Fixtures
# ===========================================================================

@pytest.fixture
def config() -> ClientConfig:
    """Provide a config independent of the test environment."""
    return ClientConfig(call_timeout=5.0)


@pytest.fixture
def fake_bus() -> FakeBus:
    """Provide a fake bus populated with one healthy reader."""
    bus = FakeBus()
    bus.replies.update({
        (Interfaces.MANAGER, "GetDevices"): dbus.Array(
            [dbus.ObjectPath(DEVICE_PATH)], signature='o'
        ),
        (Interfaces.MANAGER, "GetDefaultDevice"): dbus.ObjectPath(DEVICE_PATH),
        (Interfaces.DEVICE, "ListEnrolledFingers"): dbus.Array(
            [dbus.String("right-index-finger"), dbus.String("left-thumb")], signature='s'
        ),
    })
    properties = {
        "name": dbus.String("Synaptics Sensors"),
        "num-enroll-stages": dbus.Int32(-1),
        "scan-type": dbus.String("press"),
        "finger-present": dbus.Boolean(False),
        "finger-needed": dbus.Boolean(True),
    }
    bus.replies[(Interfaces.PROPERTIES, "Get")] = lambda iface, name: properties[name]
    bus.replies[(Interfaces.PROPERTIES, "GetAll")] = lambda iface: dbus.Dictionary(
        properties, signature='sv'
    )
    bus.device_properties = properties
    return bus


@pytest.fixture
def device(fake_bus: FakeBus, config: ClientConfig) -> Device:
    """Provide a Device bound to the fake bus."""
    return Device(fake_bus, DEVICE_PATH, config=config)


@pytest.fixture
def device_proxy(fake_bus: FakeBus, device) -> FakeProxy:
    """The fake proxy behind the `device` fixture, for emitting signals."""
    return fake_bus.proxies[DEVICE_PATH]


@pytest.fixture
def manager(fake_bus: FakeBus, config: ClientConfig) -> Manager:
    """Provide a Manager bound to the fake bus."""
    return Manager(bus=fake_bus, config=config)


@pytest.fixture
def clean_env(monkeypatch):
    """Remove FPRINT_* variables so config tests start from defaults."""
    for key in list(os.environ):
        if key.startswith("FPRINT_"):
            monkeypatch.delenv(key, raising=False)
    return monkeypatch

