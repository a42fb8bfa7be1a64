"""
Exception types raised by the relister.
"""
from typing import List, Tuple


class RelisterError(Exception):
    """Base class for relister failures."""


class LocatorExhaustedError(RelisterError):
    """Every locator strategy for a control failed."""

    def __init__(self, target: str, failures: List[Tuple[str, str]]):
        self.target = target
        self.failures = failures
        tried = ", ".join(name for name, _ in failures) or "none"
        super().__init__(f"Could not activate {target!r}; tried: {tried}")


class DialogNotFoundError(RelisterError):
    """A confirmation surface never appeared after a bulk action."""


class LoginTimeoutError(RelisterError):
    """Manual login was not detected in time."""


class RunAbortedError(RelisterError):
    """A brand job failed and the run is configured to stop on job errors."""

    def __init__(self, message: str, outcomes: list):
        self.outcomes = outcomes
        super().__init__(message)


class TableNotFoundError(RelisterError):
    """The listings table never rendered on a page that must have one."""


class ResellIncompleteError(RelisterError):
    """Listings were ended but none of them could be relisted."""
