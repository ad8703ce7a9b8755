"""Domain errors raised by the store, comparison and service layers."""

from __future__ import annotations


class ProfileNotFoundError(LookupError):
    """Raised when a profile id is not present in the store."""

    def __init__(self, profile_id: str):
        super().__init__(f"Profile not found: {profile_id!r}")
        self.profile_id = profile_id


class InsufficientProfilesError(ValueError):
    """Raised when a comparison resolves fewer than two stored profiles."""

    def __init__(self, requested: list[str], resolved: int):
        super().__init__(
            f"At least 2 profiles are required for comparison; {resolved} of {len(requested)} resolved"
        )
        self.requested = requested
        self.resolved = resolved


class SessionNotStartedError(RuntimeError):
    """Raised when the profile service is used before ``start_session``."""


__all__ = [
    "InsufficientProfilesError",
    "ProfileNotFoundError",
    "SessionNotStartedError",
]
