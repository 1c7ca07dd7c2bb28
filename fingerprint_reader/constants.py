"""
D-Bus Names and Defaults for the Fingerprint Daemon Client.

Every bus name, object path, interface, member and error name used to talk
to fprintd lives here so the wire contract can be audited in one place.
The daemon owns this interface; none of these values are ours to change.

Usage:
    from fingerprint_reader.constants import BusNames, Interfaces, Members

    bus.get_object(BusNames.FPRINT, ObjectPaths.MANAGER)
"""

from dataclasses import dataclass
from typing import FrozenSet


# =============================================================================
# BUS ADDRESSING
# =============================================================================

@dataclass(frozen=True)
class BusNames:
    """Well-known bus names."""
    FPRINT: str = "net.reactivated.Fprint"


@dataclass(frozen=True)
class ObjectPaths:
    """Fixed object paths exported by the daemon."""
    MANAGER: str = "/net/reactivated/Fprint/Manager"
    DEVICE_PREFIX: str = "/net/reactivated/Fprint/Device/"


@dataclass(frozen=True)
class Interfaces:
    """Interfaces implemented by daemon objects."""
    MANAGER: str = "net.reactivated.Fprint.Manager"
    DEVICE: str = "net.reactivated.Fprint.Device"
    PROPERTIES: str = "org.freedesktop.DBus.Properties"


# =============================================================================
# MEMBERS
# =============================================================================

@dataclass(frozen=True)
class Members:
    """Method and signal names."""
    # Manager methods
    GET_DEVICES: str = "GetDevices"
    GET_DEFAULT_DEVICE: str = "GetDefaultDevice"

    # Device methods
    CLAIM: str = "Claim"
    RELEASE: str = "Release"
    VERIFY_START: str = "VerifyStart"
    VERIFY_STOP: str = "VerifyStop"
    ENROLL_START: str = "EnrollStart"
    ENROLL_STOP: str = "EnrollStop"
    LIST_ENROLLED_FINGERS: str = "ListEnrolledFingers"

    # Device signals
    VERIFY_FINGER_SELECTED: str = "VerifyFingerSelected"
    VERIFY_STATUS: str = "VerifyStatus"
    ENROLL_STATUS: str = "EnrollStatus"

    # org.freedesktop.DBus.Properties
    GET: str = "Get"
    GET_ALL: str = "GetAll"


@dataclass(frozen=True)
class PropertyNames:
    """Property names on the device interface."""
    NAME: str = "name"
    NUM_ENROLL_STAGES: str = "num-enroll-stages"
    SCAN_TYPE: str = "scan-type"
    FINGER_PRESENT: str = "finger-present"
    FINGER_NEEDED: str = "finger-needed"


# Reported by num-enroll-stages while the device is not claimed
UNCLAIMED_ENROLL_STAGES = -1

# Sent in place of a username to mean "the calling user"
CURRENT_USER = ""


# =============================================================================
# ERROR NAMES
# =============================================================================

FPRINT_ERROR_PREFIX = "net.reactivated.Fprint.Error."

# Bus-level errors meaning the daemon is not running or could not be started
DAEMON_UNAVAILABLE_ERRORS: FrozenSet[str] = frozenset({
    "org.freedesktop.DBus.Error.ServiceUnknown",
    "org.freedesktop.DBus.Error.NameHasNoOwner",
})
DBUS_SPAWN_ERROR_PREFIX = "org.freedesktop.DBus.Error.Spawn."


# =============================================================================
# DEFAULTS
# =============================================================================

@dataclass(frozen=True)
class Defaults:
    """Client-side defaults, overridable through the environment."""
    BUS_TYPE: str = "system"
    CALL_TIMEOUT: float = 30.0        # Seconds per method call


__all__ = [
    'BusNames',
    'ObjectPaths',
    'Interfaces',
    'Members',
    'PropertyNames',
    'UNCLAIMED_ENROLL_STAGES',
    'CURRENT_USER',
    'FPRINT_ERROR_PREFIX',
    'DAEMON_UNAVAILABLE_ERRORS',
    'DBUS_SPAWN_ERROR_PREFIX',
    'Defaults',
]
