"""Error types raised by the bridge and their user-facing descriptions."""

from __future__ import annotations


class BridgeError(Exception):
    """Base class for failures whose message can be shown to the user."""


class ParameterError(BridgeError):
    """Raised when a required identifying parameter is missing or malformed."""


class ResolutionError(BridgeError):
    """Raised when a name-based lookup does not find the requested entity."""

    def __init__(self, message: str, *, entity: str | None = None, name: str | None = None) -> None:
        super().__init__(message)
        self.entity = entity
        self.name = name


class NameResolutionNotImplemented(ResolutionError):
    """Raised for entities that can only be addressed by ID."""

    def __init__(self, entity: str, name: str | None = None) -> None:
        super().__init__(
            f"Finding {entity} by name is not implemented yet",
            entity=entity,
            name=name,
        )


class ClickUpApiError(BridgeError):
    """Raised when ClickUp answers with a non-success status."""

    def __init__(self, status: int, body: str, *, resolving: str | None = None) -> None:
        self.status = status
        self.body = body
        self.resolving = resolving
        message = f"ClickUp API error ({status})"
        if resolving:
            message = f"{message} while resolving {resolving}"
        super().__init__(f"{message}: {body}")

    def while_resolving(self, resolving: str) -> "ClickUpApiError":
        """Return a copy of this error annotated with the entity being resolved."""

        return type(self)(self.status, self.body, resolving=resolving)


class RateLimitExceeded(ClickUpApiError):
    """Raised when ClickUp keeps throttling beyond the retry budget."""

    def __init__(
        self,
        *,
        attempts: int,
        waited: float,
        body: str = "",
        resolving: str | None = None,
    ) -> None:
        self.attempts = attempts
        self.waited = waited
        detail = body or f"rate limited after {attempts} attempts ({waited:.1f}s of backoff)"
        super().__init__(429, detail, resolving=resolving)

    def while_resolving(self, resolving: str) -> "RateLimitExceeded":
        return RateLimitExceeded(
            attempts=self.attempts,
            waited=self.waited,
            body=self.body,
            resolving=resolving,
        )


class DiscordApiError(Exception):
    """Raised when a Discord REST call fails."""

    def __init__(self, status: int, body: str) -> None:
        self.status = status
        self.body = body
        super().__init__(f"Discord API error ({status}): {body}")


def describe_error(exc: BaseException) -> str:
    """Return the message shown to a Discord user for *exc*.

    ClickUp error codes are mapped to friendlier categories; the underlying
    detail is kept in the text. Anything that is not a ``BridgeError`` gets a
    generic message, the details belong in the logs.
    """

    if isinstance(exc, ClickUpApiError):
        message = str(exc)
        if "NOT_FOUND" in message:
            return f"Resource not found: {message}"
        if "MISSING_PARAMETER" in message:
            return f"Missing parameter: {message}"
        if "UNAUTHORIZED" in message:
            return f"Unauthorized: Please check your ClickUp API token ({message})"
        return message

    if isinstance(exc, BridgeError):
        return str(exc)

    return "An unexpected error occurred while processing this command."
