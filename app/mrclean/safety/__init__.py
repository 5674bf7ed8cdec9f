"""Pre-flight safety checks."""

from mrclean.safety.guards import SafetyGuard, SafetyViolation, is_in_git_repo

__all__ = ["SafetyGuard", "SafetyViolation", "is_in_git_repo"]
