"""Exception hierarchy for fatal mrclean conditions.

Only configuration and precondition problems are raised. Failures that
affect a single filesystem entry during scanning or cleaning are
collected as data (see ``mrclean.models.report``) and never raised.
"""


class MrCleanError(Exception):
    """Base exception for all fatal mrclean errors."""


class RootPathError(MrCleanError):
    """Raised when the scan root cannot be resolved to an existing directory."""
