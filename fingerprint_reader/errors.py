"""
Exceptions raised by the fingerprint daemon client.

Three families, all rooted at FprintError:
- InvalidValueError: a daemon string did not match any known constant
- TransportError: the bus itself failed (connection, marshalling, timeouts)
- DaemonError: the daemon answered with one of its named errors

Nothing here retries. Callers see every failure.
"""

import logging
from typing import Dict, Optional, Type

import dbus.exceptions

from .constants import (
    DAEMON_UNAVAILABLE_ERRORS,
    DBUS_SPAWN_ERROR_PREFIX,
    FPRINT_ERROR_PREFIX,
)

logger = logging.getLogger(__name__)


class FprintError(Exception):
    """Base exception for fingerprint daemon client errors."""
    pass


# =============================================================================
# PARSE FAILURES
# =============================================================================

class InvalidValueError(FprintError, ValueError):
    """A string from the daemon is not a known constant."""

    kind = "value"

    def __init__(self, value: str):
        self.value = value
        super().__init__(f"Invalid {self.kind} {value}")


class InvalidScanTypeError(InvalidValueError):
    kind = "scan type"


class InvalidFingerError(InvalidValueError):
    kind = "fingerprint"


class InvalidVerifyStatusError(InvalidValueError):
    kind = "verify status"


class InvalidEnrollStatusError(InvalidValueError):
    kind = "enroll status"


# =============================================================================
# TRANSPORT FAILURES
# =============================================================================

class TransportError(FprintError):
    """The bus call failed before the daemon could answer."""

    def __init__(self, message: str, dbus_name: Optional[str] = None):
        self.dbus_name = dbus_name
        super().__init__(message)


class DaemonUnavailableError(TransportError):
    """Raised when the daemon is not running and cannot be activated."""
    pass


# =============================================================================
# DAEMON ERRORS
# =============================================================================

class DaemonError(FprintError):
    """
    A named error returned by the daemon.

    Subclasses are registered by the last component of their D-Bus error
    name, e.g. PermissionDeniedError for
    net.reactivated.Fprint.Error.PermissionDenied.
    """

    error_name: Optional[str] = None

    def __init__(self, message: str = "", dbus_name: Optional[str] = None):
        self.message = message
        self.dbus_name = dbus_name or (
            FPRINT_ERROR_PREFIX + self.error_name if self.error_name else None
        )
        super().__init__(message or self.dbus_name or "daemon error")


_DAEMON_ERRORS: Dict[str, Type[DaemonError]] = {}


def _register(cls: Type[DaemonError]) -> Type[DaemonError]:
    _DAEMON_ERRORS[cls.error_name] = cls
    return cls


@_register
class PrintsNotDeletedError(DaemonError):
    """Fingerprints could not be deleted from the daemon's storage."""
    error_name = "PrintsNotDeleted"


@_register
class InvalidFingernameError(DaemonError):
    """The finger name passed to the daemon was rejected."""
    error_name = "InvalidFingername"


@_register
class ClaimDeviceError(DaemonError):
    """The device was not claimed, or the claim failed."""
    error_name = "ClaimDevice"


@_register
class NoActionInProgressError(DaemonError):
    """A stop was requested with no verification or enrollment running."""
    error_name = "NoActionInProgress"


@_register
class NoEnrolledPrintsError(DaemonError):
    """The user has no fingerprints enrolled."""
    error_name = "NoEnrolledPrints"


@_register
class PermissionDeniedError(DaemonError):
    """The caller lacks the PolicyKit authorization for this call."""
    error_name = "PermissionDenied"


@_register
class AlreadyInUseError(DaemonError):
    """The device is claimed by someone else."""
    error_name = "AlreadyInUse"


@_register
class InternalError(DaemonError):
    """The daemon hit an internal failure."""
    error_name = "Internal"


@_register
class NoSuchDeviceError(DaemonError):
    """No fingerprint reader is attached."""
    error_name = "NoSuchDevice"


def daemon_error_for(name: str) -> Type[DaemonError]:
    """
    Look up the exception class for a daemon error name.

    Accepts either the full D-Bus name or just its last component.
    Unknown names map to DaemonError itself.
    """
    if name.startswith(FPRINT_ERROR_PREFIX):
        name = name[len(FPRINT_ERROR_PREFIX):]
    return _DAEMON_ERRORS.get(name, DaemonError)


def translate_dbus_exception(exc: dbus.exceptions.DBusException) -> FprintError:
    """
    Convert a dbus-python exception into this package's hierarchy.

    The caller is expected to `raise translate_dbus_exception(e) from e`.
    """
    name = exc.get_dbus_name() or ""
    message = exc.get_dbus_message() or ""

    if name.startswith(FPRINT_ERROR_PREFIX):
        cls = daemon_error_for(name)
        logger.debug(f"Daemon returned {name}: {message}")
        return cls(message, dbus_name=name)

    if name in DAEMON_UNAVAILABLE_ERRORS or name.startswith(DBUS_SPAWN_ERROR_PREFIX):
        return DaemonUnavailableError(
            f"Fingerprint daemon unavailable: {message or name}",
            dbus_name=name,
        )

    return TransportError(message or name or str(exc), dbus_name=name or None)


__all__ = [
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
    'daemon_error_for',
    'translate_dbus_exception',
]
