"""
Entry point to the daemon (net.reactivated.Fprint.Manager).

Usage:
    from fingerprint_reader import Manager

    manager = Manager()
    device = manager.default_device()
    print(device.name())
"""

from typing import List, Optional

import dbus.exceptions

from .bus import get_bus
from .config import ClientConfig
from .constants import Interfaces, Members, ObjectPaths
from .device import Device
from .errors import translate_dbus_exception
from .logging_config import get_logger

logger = get_logger(__name__)


class Manager:
    """
    Enumerates the fingerprint readers known to the daemon.

    Args:
        bus: dbus-python connection; connects to the configured bus if None
        config: Client settings; resolved from the environment if None
    """

    def __init__(self, bus=None, config: Optional[ClientConfig] = None):
        self.config = config or ClientConfig.from_environment()
        self.bus = bus if bus is not None else get_bus(self.config.bus_type)
        try:
            self._proxy = self.bus.get_object(
                self.config.bus_name, ObjectPaths.MANAGER, introspect=False
            )
        except dbus.exceptions.DBusException as e:
            raise translate_dbus_exception(e) from e

    def _call(self, member: str):
        method = self._proxy.get_dbus_method(member, Interfaces.MANAGER)
        logger.verbose(f"Manager: {member}")
        try:
            reply = method(timeout=self.config.call_timeout)
        except dbus.exceptions.DBusException as e:
            logger.verbose(f"Manager: {member} failed: {e.get_dbus_name()}")
            raise translate_dbus_exception(e) from e
        logger.trace(f"Manager: {member} -> {reply!r}")
        return reply

    def device(self, object_path: str) -> Device:
        """Wrap a device object path already known to the caller."""
        return Device(self.bus, object_path, config=self.config)

    def devices(self) -> List[Device]:
        """All readers currently attached, possibly none."""
        paths = self._call(Members.GET_DEVICES)
        logger.verbose(f"Daemon reports {len(paths)} device(s)")
        return [self.device(path) for path in paths]

    def default_device(self) -> Device:
        """
        The reader the daemon would pick by default.

        Raises:
            NoSuchDeviceError: no reader is attached
        """
        return self.device(self._call(Members.GET_DEFAULT_DEVICE))


__all__ = [
    'Manager',
]
