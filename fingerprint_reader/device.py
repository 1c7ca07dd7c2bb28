"""
Proxy for one fingerprint reader exported by the daemon
(net.reactivated.Fprint.Device).

A Device holds nothing but the remote object reference. Every accessor is
a round trip to the daemon, and every daemon or bus failure surfaces as a
FprintError subclass.
"""

from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Optional, Tuple

import dbus
import dbus.exceptions

from .config import ClientConfig
from .constants import (
    CURRENT_USER,
    UNCLAIMED_ENROLL_STAGES,
    Interfaces,
    Members,
    PropertyNames,
)
from .enums import EnrollStatus, Finger, ScanType, VerifyStatus
from .errors import FprintError, translate_dbus_exception
from .logging_config import get_logger
from .signals import SignalStream

logger = get_logger(__name__)


def _enroll_stages(value: Any) -> Optional[int]:
    stages = int(value)
    if stages == UNCLAIMED_ENROLL_STAGES:
        return None
    return stages


@dataclass
class DeviceProperties:
    """Snapshot of every device property, read in one call."""
    name: str
    num_enroll_stages: Optional[int]
    scan_type: ScanType
    finger_present: bool
    finger_needed: bool

    @classmethod
    def from_dbus(cls, props: Dict[str, Any]) -> 'DeviceProperties':
        """Build from a Properties.GetAll reply."""
        return cls(
            name=str(props[PropertyNames.NAME]),
            num_enroll_stages=_enroll_stages(props[PropertyNames.NUM_ENROLL_STAGES]),
            scan_type=ScanType.from_string(str(props[PropertyNames.SCAN_TYPE])),
            finger_present=bool(props[PropertyNames.FINGER_PRESENT]),
            finger_needed=bool(props[PropertyNames.FINGER_NEEDED]),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'num_enroll_stages': self.num_enroll_stages,
            'scan_type': self.scan_type.value,
            'finger_present': self.finger_present,
            'finger_needed': self.finger_needed,
        }


def _check_types(result, done=False) -> None:
    # Signal arguments must match the (s) and (sb) signatures exactly
    if not isinstance(result, str):
        raise TypeError(f"expected a string, got {type(result).__name__}")
    if not isinstance(done, (bool, dbus.Boolean)):
        raise TypeError(f"expected a boolean, got {type(done).__name__}")


def _parse_finger_selected(finger) -> Finger:
    _check_types(finger)
    return Finger.from_string(str(finger))


def _parse_verify_status(result, done) -> Tuple[VerifyStatus, bool]:
    _check_types(result, done)
    return VerifyStatus.from_string(str(result)), bool(done)


def _parse_enroll_status(result, done) -> Tuple[EnrollStatus, bool]:
    _check_types(result, done)
    return EnrollStatus.from_string(str(result)), bool(done)


class Device:
    """
    A fingerprint reader.

    Obtain instances from Manager.devices() or Manager.default_device()
    rather than constructing them directly.
    """

    def __init__(self, bus, object_path: str, config: Optional[ClientConfig] = None):
        self.config = config or ClientConfig.from_environment()
        self.object_path = str(object_path)
        try:
            self._proxy = bus.get_object(
                self.config.bus_name, self.object_path, introspect=False
            )
        except dbus.exceptions.DBusException as e:
            raise translate_dbus_exception(e) from e

    def __repr__(self) -> str:
        return f"<Device {self.object_path}>"

    def __eq__(self, other) -> bool:
        if not isinstance(other, Device):
            return NotImplemented
        return self.object_path == other.object_path

    def __hash__(self) -> int:
        return hash(self.object_path)

    # -------------------------------------------------------------------------
    # Transport
    # -------------------------------------------------------------------------

    def _call(self, interface: str, member: str, *args, signature: Optional[str] = None):
        method = self._proxy.get_dbus_method(member, interface)
        kwargs: Dict[str, Any] = {'timeout': self.config.call_timeout}
        if signature is not None:
            kwargs['signature'] = signature
        logger.verbose(f"{self.object_path}: {member}")
        logger.trace(f"{self.object_path}: {interface}.{member}{args!r}")
        try:
            reply = method(*args, **kwargs)
        except dbus.exceptions.DBusException as e:
            logger.verbose(f"{self.object_path}: {member} failed: {e.get_dbus_name()}")
            raise translate_dbus_exception(e) from e
        logger.trace(f"{self.object_path}: {member} -> {reply!r}")
        return reply

    def _get_property(self, name: str):
        return self._call(
            Interfaces.PROPERTIES, Members.GET,
            Interfaces.DEVICE, name,
            signature='ss',
        )

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    def name(self) -> str:
        """Human-readable product name of the reader."""
        return str(self._get_property(PropertyNames.NAME))

    def num_enroll_stages(self) -> Optional[int]:
        """
        Number of scans an enrollment needs.

        Returns None while the device has not been claimed, which the
        daemon reports as -1.
        """
        return _enroll_stages(self._get_property(PropertyNames.NUM_ENROLL_STAGES))

    def scan_type(self) -> ScanType:
        return ScanType.from_string(str(self._get_property(PropertyNames.SCAN_TYPE)))

    def finger_present(self) -> bool:
        return bool(self._get_property(PropertyNames.FINGER_PRESENT))

    def finger_needed(self) -> bool:
        return bool(self._get_property(PropertyNames.FINGER_NEEDED))

    def properties(self) -> DeviceProperties:
        """Read all properties with a single GetAll call."""
        props = self._call(
            Interfaces.PROPERTIES, Members.GET_ALL,
            Interfaces.DEVICE,
            signature='s',
        )
        return DeviceProperties.from_dbus(props)

    # -------------------------------------------------------------------------
    # Methods
    # -------------------------------------------------------------------------

    def list_enrolled_fingers(self, username: Optional[str] = None) -> List[Finger]:
        """
        Fingers enrolled for a user (the caller when username is None).

        The daemon answers NoEnrolledPrints rather than an empty list when
        the user has nothing enrolled.
        """
        names = self._call(
            Interfaces.DEVICE, Members.LIST_ENROLLED_FINGERS,
            username or CURRENT_USER,
            signature='s',
        )
        return [Finger.from_string(str(name)) for name in names]

    def claim(self, username: Optional[str] = None) -> None:
        """Take the daemon-side exclusive lock on this device."""
        self._call(
            Interfaces.DEVICE, Members.CLAIM,
            username or CURRENT_USER,
            signature='s',
        )
        logger.info(f"Claimed {self.object_path} for {username or 'current user'}")

    def release(self) -> None:
        self._call(Interfaces.DEVICE, Members.RELEASE)
        logger.info(f"Released {self.object_path}")

    @contextmanager
    def claimed(self, username: Optional[str] = None) -> Iterator['Device']:
        """
        Hold a claim for the duration of a with-block.

        The device is released on exit even if the block raises. A release
        failure after a failing block is logged and the block's exception
        propagates.
        """
        self.claim(username)
        try:
            yield self
        except BaseException:
            try:
                self.release()
            except FprintError as e:
                logger.warning(f"Release of {self.object_path} failed: {e}")
            raise
        self.release()

    def verify_start(self, finger: Finger = Finger.ANY) -> None:
        """Start verification; results arrive on receive_verify_status()."""
        self._call(
            Interfaces.DEVICE, Members.VERIFY_START,
            finger.as_str(),
            signature='s',
        )

    def verify_stop(self) -> None:
        self._call(Interfaces.DEVICE, Members.VERIFY_STOP)

    def enroll_start(self, finger: Finger) -> None:
        """Start enrollment; progress arrives on receive_enroll_status()."""
        self._call(
            Interfaces.DEVICE, Members.ENROLL_START,
            finger.as_str(),
            signature='s',
        )

    def enroll_stop(self) -> None:
        self._call(Interfaces.DEVICE, Members.ENROLL_STOP)

    # -------------------------------------------------------------------------
    # Signals
    # -------------------------------------------------------------------------

    def _receive(self, signal_name: str, parser) -> SignalStream:
        return SignalStream(self._proxy, signal_name, Interfaces.DEVICE, parser)

    def receive_verify_finger_selected(self) -> SignalStream[Finger]:
        """Stream of fingers the daemon picked when verifying with Finger.ANY."""
        return self._receive(Members.VERIFY_FINGER_SELECTED, _parse_finger_selected)

    def receive_verify_status(self) -> SignalStream[Tuple[VerifyStatus, bool]]:
        """Stream of (status, done) pairs from VerifyStatus."""
        return self._receive(Members.VERIFY_STATUS, _parse_verify_status)

    def receive_enroll_status(self) -> SignalStream[Tuple[EnrollStatus, bool]]:
        """Stream of (status, done) pairs from EnrollStatus."""
        return self._receive(Members.ENROLL_STATUS, _parse_enroll_status)


__all__ = [
    'Device',
    'DeviceProperties',
]
