class InvalidRuleError(ValueError):
    """A recurrence rule is missing fields for its kind or has out-of-range values."""


class InvalidWindowError(ValueError):
    """A query window whose start falls after its end."""


class DataFileError(ValueError):
    """A data file that cannot be read into rules and transactions."""
