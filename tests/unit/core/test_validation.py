from __future__ import annotations

import pytest

from restcall.core import validate_retry_params, validate_timeout

#######################################
#     Tests for validate_timeout     #
#######################################


@pytest.mark.parametrize("timeout", [0.1, 1.0, 10.0, 30.0, 100])
def test_validate_timeout_accepts_valid_values(timeout: float) -> None:
    """Test that validate_timeout accepts valid timeout values."""
    validate_timeout(timeout)


def test_validate_timeout_rejects_zero() -> None:
    """Test that validate_timeout rejects zero timeout."""
    with pytest.raises(ValueError, match=r"timeout must be > 0, got 0"):
        validate_timeout(0)


def test_validate_timeout_rejects_negative() -> None:
    """Test that validate_timeout rejects negative timeout."""
    with pytest.raises(ValueError, match=r"timeout must be > 0, got -1.0"):
        validate_timeout(-1.0)


def test_validate_timeout_custom_name() -> None:
    with pytest.raises(ValueError, match=r"request_timeout must be > 0, got 0"):
        validate_timeout(0, name="request_timeout")


###########################################
#     Tests for validate_retry_params     #
###########################################


@pytest.mark.parametrize(("retry_count", "retry_delay"), [(0, 0.0), (3, 0.3), (10, 1.5)])
def test_validate_retry_params_accepts_valid_values(retry_count: int, retry_delay: float) -> None:
    """Test that validate_retry_params accepts valid parameters."""
    validate_retry_params(retry_count=retry_count, retry_delay=retry_delay)


def test_validate_retry_params_rejects_negative_retry_count() -> None:
    """Test that validate_retry_params rejects negative retry_count."""
    with pytest.raises(ValueError, match=r"retry_count must be >= 0, got -1"):
        validate_retry_params(retry_count=-1, retry_delay=1.0)


def test_validate_retry_params_rejects_negative_retry_delay() -> None:
    """Test that validate_retry_params rejects negative retry_delay."""
    with pytest.raises(ValueError, match=r"retry_delay must be >= 0, got -0.5"):
        validate_retry_params(retry_count=3, retry_delay=-0.5)
