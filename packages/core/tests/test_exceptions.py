"""Tests for the DuitTrack exception hierarchy."""

import pytest

from duittrack_core.exceptions import DuitTrackError, StoreError, ValidationError


class TestDuitTrackError:
    """Test suite for DuitTrackError."""

    def test_message_and_defaults(self):
        error = DuitTrackError("Something went wrong")

        assert str(error) == "Something went wrong"
        assert error.details == {}
        assert error.recoverable is False

    def test_repr(self):
        error = DuitTrackError("Oops", details={"code": 500})

        assert repr(error) == (
            "DuitTrackError(message='Oops', details={'code': 500}, recoverable=False)"
        )


class TestValidationError:
    def test_context_copied_into_details(self):
        error = ValidationError(
            "Reset date harus antara 1-31.",
            field="reset_day",
            value=42,
            constraint="1 <= reset_day <= 31",
        )

        assert error.recoverable is True
        assert error.details == {
            "field": "reset_day",
            "value": 42,
            "constraint": "1 <= reset_day <= 31",
        }

    def test_is_duittrack_error(self):
        with pytest.raises(DuitTrackError):
            raise ValidationError("bad")


class TestStoreError:
    def test_context_copied_into_details(self):
        error = StoreError("write failed", operation="save_periods", period_id="2025-11-01")

        assert error.operation == "save_periods"
        assert error.period_id == "2025-11-01"
        assert error.recoverable is True
        assert error.details == {"operation": "save_periods", "period_id": "2025-11-01"}

    def test_not_recoverable(self):
        assert StoreError("permission denied", recoverable=False).recoverable is False
