"""Exception types raised while building a tracker dataset."""


class TrackerDatasetError(Exception):
    pass


class InvalidPeriod(TrackerDatasetError, ValueError):
    def __init__(self, code):
        super().__init__(f"invalid dataset period {code!r}")
        self.code = code


class InvalidInterval(TrackerDatasetError, ValueError):
    def __init__(self, interval, reason: str):
        super().__init__(f"invalid interval {interval!r}: {reason}")
        self.interval = interval
        self.reason = reason


class OracleValidationError(TrackerDatasetError):
    """An input field of a sun position request was out of range.

    Non-fatal: the run logs it and keeps the oracle's values.
    """

    def __init__(self, code: int, message: str, request=None):
        super().__init__(f"oracle error {code}: {message}")
        self.code = code
        self.request = request


class DatasetWriteError(TrackerDatasetError, OSError):
    def __init__(self, path, action: str, cause: OSError | None = None):
        super().__init__(f"Error open {path} for {action}: {cause}")
        self.path = path
        self.action = action
