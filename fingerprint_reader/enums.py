"""
Enumerations mirroring the fingerprint daemon's string constants.

Each member's value is the exact string the daemon sends or expects, so
`member.value` is what goes on the wire and `from_string()` is the only
way back. Matching is exact and case-sensitive.
"""

from enum import Enum
from typing import List

from .errors import (
    InvalidEnrollStatusError,
    InvalidFingerError,
    InvalidScanTypeError,
    InvalidValueError,
    InvalidVerifyStatusError,
)


class _DaemonString(Enum):
    """Base for enums whose values are daemon strings."""

    @classmethod
    def from_string(cls, value: str):
        try:
            return cls(value)
        except ValueError:
            raise _INVALID_ERRORS.get(cls, InvalidValueError)(value) from None

    def as_str(self) -> str:
        return self.value

    def __str__(self) -> str:
        return self.value


class ScanType(_DaemonString):
    """How the reader expects the finger to be presented."""
    PRESS = "press"
    SWIPE = "swipe"


class Finger(_DaemonString):
    """Finger identities understood by the daemon."""
    LEFT_THUMB = "left-thumb"
    LEFT_INDEX_FINGER = "left-index-finger"
    LEFT_MIDDLE_FINGER = "left-middle-finger"
    LEFT_RING_FINGER = "left-ring-finger"
    LEFT_LITTLE_FINGER = "left-little-finger"
    RIGHT_THUMB = "right-thumb"
    RIGHT_INDEX_FINGER = "right-index-finger"
    RIGHT_MIDDLE_FINGER = "right-middle-finger"
    RIGHT_RING_FINGER = "right-ring-finger"
    RIGHT_LITTLE_FINGER = "right-little-finger"
    # Only valid for VerifyStart: match against any enrolled finger
    ANY = "any"

    @classmethod
    def left_hand(cls) -> List['Finger']:
        return [f for f in cls if f.value.startswith("left-")]

    @classmethod
    def right_hand(cls) -> List['Finger']:
        return [f for f in cls if f.value.startswith("right-")]


class VerifyStatus(_DaemonString):
    """Result codes carried by the VerifyStatus signal."""
    NO_MATCH = "verify-no-match"
    MATCH = "verify-match"
    RETRY_SCAN = "verify-retry-scan"
    SWIPE_TOO_SHORT = "verify-swipe-too-short"
    FINGER_NOT_CENTERED = "verify-finger-not-centered"
    REMOVE_AND_RETRY = "verify-remove-and-retry"
    DISCONNECTED = "verify-disconnected"
    UNKNOWN = "verify-unknown-error"

    @property
    def is_retry(self) -> bool:
        """True when the user should simply present the finger again."""
        return self in _VERIFY_RETRY


_VERIFY_RETRY = frozenset({
    VerifyStatus.RETRY_SCAN,
    VerifyStatus.SWIPE_TOO_SHORT,
    VerifyStatus.FINGER_NOT_CENTERED,
    VerifyStatus.REMOVE_AND_RETRY,
})


class EnrollStatus(_DaemonString):
    """Result codes carried by the EnrollStatus signal."""
    COMPLETED = "enroll-completed"
    FAILED = "enroll-failed"
    STAGE_PASSED = "enroll-stage-passed"
    RETRY_SCAN = "enroll-retry-scan"
    SWIPE_TOO_SHORT = "enroll-swipe-too-short"
    FINGER_NOT_CENTERED = "enroll-finger-not-centered"
    REMOVE_AND_RETRY = "enroll-remove-and-retry"
    DATA_FULL = "enroll-data-full"
    DUPLICATE = "enroll-duplicate"
    DISCONNECTED = "enroll-disconnected"
    UNKNOWN = "enroll-unknown-error"

    @property
    def is_retry(self) -> bool:
        """True when the current stage must be scanned again."""
        return self in _ENROLL_RETRY


_ENROLL_RETRY = frozenset({
    EnrollStatus.RETRY_SCAN,
    EnrollStatus.SWIPE_TOO_SHORT,
    EnrollStatus.FINGER_NOT_CENTERED,
    EnrollStatus.REMOVE_AND_RETRY,
})

_INVALID_ERRORS = {
    ScanType: InvalidScanTypeError,
    Finger: InvalidFingerError,
    VerifyStatus: InvalidVerifyStatusError,
    EnrollStatus: InvalidEnrollStatusError,
}


__all__ = [
    'ScanType',
    'Finger',
    'VerifyStatus',
    'EnrollStatus',
]
