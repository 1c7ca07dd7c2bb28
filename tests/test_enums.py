"""
Tests for the enums module.

Every daemon string must parse to its member and back; anything else must
fail with the matching parse error.
"""

import os
import sys

import dbus
import pytest

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from fingerprint_reader.enums import EnrollStatus, Finger, ScanType, VerifyStatus
from fingerprint_reader.errors import (
    FprintError,
    InvalidEnrollStatusError,
    InvalidFingerError,
    InvalidScanTypeError,
    InvalidValueError,
    InvalidVerifyStatusError,
)


ALL_ENUMS = [ScanType, Finger, VerifyStatus, EnrollStatus]


# ===========================================================================
# Round Trips
# ===========================================================================

class TestRoundTrip:
    """Tests for from_string()/as_str() symmetry."""

    @pytest.mark.parametrize("enum_cls", ALL_ENUMS)
    def test_every_member_round_trips(self, enum_cls):
        """from_string(as_str()) should return the same member."""
        for member in enum_cls:
            assert enum_cls.from_string(member.as_str()) is member

    @pytest.mark.parametrize("enum_cls", ALL_ENUMS)
    def test_str_is_daemon_string(self, enum_cls):
        """str(member) should be the wire value."""
        for member in enum_cls:
            assert str(member) == member.value == member.as_str()

    def test_accepts_dbus_string(self):
        """dbus.String payloads should parse like plain str."""
        assert Finger.from_string(dbus.String("left-thumb")) is Finger.LEFT_THUMB


# ===========================================================================
# Daemon String Values
# ===========================================================================

class TestScanType:
    """Tests for ScanType."""

    def test_values(self):
        assert ScanType.from_string("press") is ScanType.PRESS
        assert ScanType.from_string("swipe") is ScanType.SWIPE
        assert len(ScanType) == 2

    def test_unknown_raises(self):
        with pytest.raises(InvalidScanTypeError) as exc_info:
            ScanType.from_string("tap")
        assert exc_info.value.value == "tap"
        assert str(exc_info.value) == "Invalid scan type tap"


class TestFinger:
    """Tests for Finger."""

    def test_all_finger_strings(self):
        """Left/right x five fingers plus any."""
        expected = {
            f"{hand}-{finger}"
            for hand in ("left", "right")
            for finger in ("thumb", "index-finger", "middle-finger",
                           "ring-finger", "little-finger")
        } | {"any"}
        assert {f.value for f in Finger} == expected

    def test_hands(self):
        """Each hand should have five fingers; ANY belongs to neither."""
        assert len(Finger.left_hand()) == 5
        assert len(Finger.right_hand()) == 5
        assert Finger.ANY not in Finger.left_hand()
        assert Finger.ANY not in Finger.right_hand()
        assert Finger.LEFT_LITTLE_FINGER in Finger.left_hand()
        assert Finger.RIGHT_THUMB in Finger.right_hand()

    def test_case_sensitive(self):
        with pytest.raises(InvalidFingerError):
            Finger.from_string("Left-Thumb")

    def test_unknown_raises(self):
        with pytest.raises(InvalidFingerError) as exc_info:
            Finger.from_string("left-pinky")
        assert str(exc_info.value) == "Invalid fingerprint left-pinky"


class TestVerifyStatus:
    """Tests for VerifyStatus."""

    def test_values(self):
        assert VerifyStatus.from_string("verify-no-match") is VerifyStatus.NO_MATCH
        assert VerifyStatus.from_string("verify-match") is VerifyStatus.MATCH
        assert VerifyStatus.from_string("verify-retry-scan") is VerifyStatus.RETRY_SCAN
        assert VerifyStatus.from_string("verify-swipe-too-short") is VerifyStatus.SWIPE_TOO_SHORT
        assert VerifyStatus.from_string("verify-finger-not-centered") is VerifyStatus.FINGER_NOT_CENTERED
        assert VerifyStatus.from_string("verify-remove-and-retry") is VerifyStatus.REMOVE_AND_RETRY
        assert VerifyStatus.from_string("verify-disconnected") is VerifyStatus.DISCONNECTED
        assert VerifyStatus.from_string("verify-unknown-error") is VerifyStatus.UNKNOWN
        assert len(VerifyStatus) == 8

    def test_retry_statuses(self):
        retry = {s for s in VerifyStatus if s.is_retry}
        assert retry == {
            VerifyStatus.RETRY_SCAN,
            VerifyStatus.SWIPE_TOO_SHORT,
            VerifyStatus.FINGER_NOT_CENTERED,
            VerifyStatus.REMOVE_AND_RETRY,
        }

    def test_enroll_string_is_not_verify(self):
        """An enroll status should not parse as a verify status."""
        with pytest.raises(InvalidVerifyStatusError):
            VerifyStatus.from_string("enroll-completed")


class TestEnrollStatus:
    """Tests for EnrollStatus."""

    def test_values(self):
        assert EnrollStatus.from_string("enroll-completed") is EnrollStatus.COMPLETED
        assert EnrollStatus.from_string("enroll-failed") is EnrollStatus.FAILED
        assert EnrollStatus.from_string("enroll-stage-passed") is EnrollStatus.STAGE_PASSED
        assert EnrollStatus.from_string("enroll-retry-scan") is EnrollStatus.RETRY_SCAN
        assert EnrollStatus.from_string("enroll-swipe-too-short") is EnrollStatus.SWIPE_TOO_SHORT
        assert EnrollStatus.from_string("enroll-finger-not-centered") is EnrollStatus.FINGER_NOT_CENTERED
        assert EnrollStatus.from_string("enroll-remove-and-retry") is EnrollStatus.REMOVE_AND_RETRY
        assert EnrollStatus.from_string("enroll-data-full") is EnrollStatus.DATA_FULL
        assert EnrollStatus.from_string("enroll-duplicate") is EnrollStatus.DUPLICATE
        assert EnrollStatus.from_string("enroll-disconnected") is EnrollStatus.DISCONNECTED
        assert EnrollStatus.from_string("enroll-unknown-error") is EnrollStatus.UNKNOWN
        assert len(EnrollStatus) == 11

    def test_terminal_statuses_are_not_retry(self):
        assert not EnrollStatus.COMPLETED.is_retry
        assert not EnrollStatus.DATA_FULL.is_retry
        assert EnrollStatus.REMOVE_AND_RETRY.is_retry


# ===========================================================================
# Parse Errors
# ===========================================================================

class TestParseErrors:
    """Tests for the errors raised on unknown strings."""

    @pytest.mark.parametrize("enum_cls,error_cls", [
        (ScanType, InvalidScanTypeError),
        (Finger, InvalidFingerError),
        (VerifyStatus, InvalidVerifyStatusError),
        (EnrollStatus, InvalidEnrollStatusError),
    ])
    @pytest.mark.parametrize("bad", ["", "bogus", None])
    def test_unknown_value(self, enum_cls, error_cls, bad):
        """Unknown values should raise the enum's own error class."""
        with pytest.raises(error_cls) as exc_info:
            enum_cls.from_string(bad)
        assert exc_info.value.value == bad

    def test_errors_are_value_errors(self):
        """Parse errors should be catchable as ValueError and FprintError."""
        with pytest.raises(ValueError):
            ScanType.from_string("nope")
        with pytest.raises(FprintError):
            ScanType.from_string("nope")
        assert issubclass(InvalidFingerError, InvalidValueError)
