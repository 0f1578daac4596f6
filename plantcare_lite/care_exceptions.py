"""Custom exception hierarchy for care schedule errors.

The occurrence engine itself never lets these escape for task content it
cannot interpret: they are raised by the strict parsing helpers and caught
at the aggregation boundary, where the task degrades to "no occurrences"
(or to a single ad-hoc occurrence for an unreadable frequency).
"""


class CareScheduleError(Exception):
    """Base exception for all care schedule errors."""


class FrequencyParseError(CareScheduleError):
    """Frequency text could not be parsed.

    Raised when:
    - The text is empty or not one of the known tokens
    - An "Every N ..." pattern has a non-positive N
    """


class AnchorDateError(CareScheduleError):
    """Anchor due date is missing or is not a valid ISO-8601 timestamp."""


class CareDataError(CareScheduleError):
    """Plant/task payload could not be loaded.

    Raised when:
    - The data file does not exist or cannot be decoded
    - The top level is not a mapping
    """


class ConfigError(CareScheduleError):
    """Configuration file is present but unusable."""
