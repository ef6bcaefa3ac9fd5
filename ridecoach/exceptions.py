from __future__ import annotations


class CoachingContextError(RuntimeError):
    """Raised when a coaching context cannot be built from upstream data."""

    def __init__(self, user_id: str, message: str = "coaching context unavailable"):
        self.user_id = user_id
        super().__init__(f"{message} for user {user_id}")
