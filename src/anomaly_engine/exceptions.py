"""Errors raised at the boundary of the anomaly engine."""
from typing import Optional


class AnomalyEngineError(Exception):
    """Base class for all engine errors."""


class ConfigurationError(AnomalyEngineError):
    """
    Run parameters (degrees of separation D, threshold T) are missing or
    events arrived before they were known. Fatal for the run.
    """


class MalformedEventError(AnomalyEngineError):
    """
    An input record could not be turned into an event (bad JSON, unknown
    event_type, missing fields). Non-fatal: the row is skipped.
    """

    def __init__(self, message: str, line: Optional[str] = None):
        super().__init__(message)
        self.line = line
