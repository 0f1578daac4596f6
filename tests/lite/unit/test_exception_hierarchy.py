"""Unit tests for the care schedule exception hierarchy."""

import pytest

from plantcare_lite.care_exceptions import (
    AnchorDateError,
    CareDataError,
    CareScheduleError,
    ConfigError,
    FrequencyParseError,
)

pytestmark = pytest.mark.unit


@pytest.mark.parametrize("exc_type", [FrequencyParseError, AnchorDateError, CareDataError, ConfigError])
def test_all_errors_share_a_base(exc_type) -> None:
    assert issubclass(exc_type, CareScheduleError)
    assert issubclass(exc_type, Exception)


def test_base_catches_specific_errors() -> None:
    with pytest.raises(CareScheduleError, match="bad frequency"):
        raise FrequencyParseError("bad frequency")


def test_errors_keep_their_cause() -> None:
    cause = ValueError("boom")
    try:
        try:
            raise cause
        except ValueError as e:
            raise AnchorDateError("wrapped") from e
    except AnchorDateError as error:
        assert error.__cause__ is cause
