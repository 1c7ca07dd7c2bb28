"""
Client library for the fprintd fingerprint daemon.

Maps the daemon's D-Bus interface (device enumeration, enrollment and
verification) onto Python objects. All capture, matching and storage
happens inside the daemon.
"""

from .bus import GLIB_AVAILABLE, MainLoopThread, get_bus
from .config import ClientConfig
from .device import Device, DeviceProperties
from .enums import EnrollStatus, Finger, ScanType, VerifyStatus
from .errors import (
    AlreadyInUseError,
    ClaimDeviceError,
    DaemonError,
    DaemonUnavailableError,
    FprintError,
    InternalError,
    InvalidEnrollStatusError,
    InvalidFingerError,
    InvalidFingernameError,
    InvalidScanTypeError,
    InvalidValueError,
    InvalidVerifyStatusError,
    NoActionInProgressError,
    NoEnrolledPrintsError,
    NoSuchDeviceError,
    PermissionDeniedError,
    PrintsNotDeletedError,
    TransportError,
)
from .manager import Manager
from .signals import SignalStream, SignalTimeout, StreamClosed

__version__ = "1.0.0"

__all__ = [
    # Proxies
    'Manager',
    'Device',
    'DeviceProperties',
    # Enums
    'ScanType',
    'Finger',
    'VerifyStatus',
    'EnrollStatus',
    # Signals
    'SignalStream',
    'SignalTimeout',
    'StreamClosed',
    # Bus
    'get_bus',
    'MainLoopThread',
    'GLIB_AVAILABLE',
    'ClientConfig',
    # Errors
    'FprintError',
    'InvalidValueError',
    'InvalidScanTypeError',
    'InvalidFingerError',
    'InvalidVerifyStatusError',
    'InvalidEnrollStatusError',
    'TransportError',
    'DaemonUnavailableError',
    'DaemonError',
    'PrintsNotDeletedError',
    'InvalidFingernameError',
    'ClaimDeviceError',
    'NoActionInProgressError',
    'NoEnrolledPrintsError',
    'PermissionDeniedError',
    'AlreadyInUseError',
    'InternalError',
    'NoSuchDeviceError',
]
