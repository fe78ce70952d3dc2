# timereport/core/errors.py
# Failures a report generation can end with. Each one aborts the whole report.


class ReportError(Exception):
    kind = "report_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class TransientFetchError(ReportError):
    """A data-source call failed (network, storage, bad HTTP status)."""
    kind = "transient_fetch"


class DataIntegrityError(ReportError):
    """Source records are malformed, e.g. clock-out before clock-in."""
    kind = "data_integrity"


class InvalidRangeError(ReportError):
    """Start/end dates are missing, unparseable, or reversed."""
    kind = "invalid_range"
