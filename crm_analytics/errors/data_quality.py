"""
Data quality error classifications for CRM record processing.

These exceptions flag caller contract violations in the record snapshot.
Per-field problems (null amounts, missing dates, missing labels) are
recovered with documented defaults and never raised.
"""

from typing import Optional, Dict, Any


class DataQualityError(Exception):
    """Base class for data quality issues in an input snapshot."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.context = context or {}
        self.recoverable = True


class MissingDataError(DataQualityError):
    """Required input is completely missing."""

    def __init__(self, message: str, data_type: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.data_type = data_type


class MalformedDataError(DataQualityError):
    """Input exists but has the wrong shape."""

    def __init__(self, message: str, raw_data: Optional[str] = None,
                 expected_format: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.raw_data = raw_data
        self.expected_format = expected_format
