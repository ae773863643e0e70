"""Errors raised by the vote and result operations.

Every error carries the HTTP status it maps to and a message that is safe to
show to the client. Store failures keep the underlying cause chained
(``raise ... from``) for logging only.
"""


class VoteError(Exception):
    status_code = 500
    message = "Something went wrong while processing the vote."

    def __init__(self, message: str = None):
        if message is not None:
            self.message = message
        super().__init__(self.message)


class RateLimited(VoteError):
    """Cooldown still active for this client."""

    status_code = 429

    def __init__(self, remaining_seconds: int, cooldown_ms: int):
        self.remaining_seconds = remaining_seconds
        self.cooldown_ms = cooldown_ms
        super().__init__(
            f"You cannot vote that often. Try again in {remaining_seconds} seconds."
        )


class ValidationError(VoteError):
    status_code = 400


class PersistenceError(VoteError):
    status_code = 500


class PersistenceReadError(PersistenceError):
    message = "Failed to read vote results."


class PersistenceWriteError(PersistenceError):
    message = "Failed to record the vote."
