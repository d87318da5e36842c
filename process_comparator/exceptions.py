"""
Custom exception hierarchy for comparison orchestration.

Only EmptyBatchError ever escapes a batch call. Every other exception is
caught at the unit boundary and converted into an ERROR-severity result.
"""


class ProcessComparatorError(Exception):
    """
    Base exception for all comparator-related errors.
    """

    pass


class EmptyBatchError(ProcessComparatorError):
    """
    Raised when the orchestrator receives a batch with no comparison units.

    This is the only batch-fatal condition.
    """

    pass


class ComparatorError(ProcessComparatorError):
    """
    Raised by comparator plugins on malformed input content.

    Fatal for the single comparison unit only.
    """

    pass


class ComparatorNotFoundError(ComparatorError):
    """
    Raised when no comparator is registered for a content type tag.
    """

    pass


class ContentConversionError(ComparatorError):
    """
    Raised when content cannot be decoded or re-encoded for a content type.
    """

    pass


class ConfigurationError(ProcessComparatorError):
    """Exception raised for configuration-related errors."""

    pass
