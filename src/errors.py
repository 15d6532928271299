"""
Errors raised while fetching or decoding shortcuts.

Each error carries three human-readable strings, mirroring what a UI
would show: a short description, the failure reason, and a recovery
suggestion. Two errors compare equal when they are the same kind and
carry the same identifying payload (underlying causes are ignored).
"""

from __future__ import annotations


class ShortcutError(Exception):
    """Base class for shortcut fetch/decode failures."""

    description = "Shortcut Error"
    recovery_suggestion = "Check your internet connection and try again."

    def __init__(self, failure_reason: str):
        super().__init__(failure_reason)
        self.failure_reason = failure_reason

    def _identity(self) -> tuple:
        return ()

    @property
    def id(self) -> str:
        parts = [type(self).__name__] + [str(p) for p in self._identity()]
        return ":".join(parts)

    def __eq__(self, other: object) -> bool:
        if type(self) is not type(other):
            return NotImplemented
        return self._identity() == other._identity()  # type: ignore[attr-defined]

    def __hash__(self) -> int:
        return hash((type(self).__name__, self._identity()))

    def __str__(self) -> str:
        return f"{self.description}: {self.failure_reason}"


class InvalidURL(ShortcutError):
    description = "Invalid URL"
    recovery_suggestion = "Check that the URL is correctly formatted."

    def __init__(self, url: str):
        super().__init__(f"The URL '{url}' is invalid or malformed.")
        self.url = url

    def _identity(self) -> tuple:
        return (self.url,)


class NetworkError(ShortcutError):
    description = "Network Error"

    def __init__(self, underlying: BaseException):
        super().__init__(f"A network error occurred: {underlying}")
        self.underlying = underlying


class InvalidResponse(ShortcutError):
    description = "Invalid Response"
    recovery_suggestion = "The shortcut may no longer be available. Try again later."

    def __init__(self, status_code: int | None = None):
        if status_code is not None:
            reason = f"The server returned status code {status_code}."
        else:
            reason = "The server returned an invalid response."
        super().__init__(reason)
        self.status_code = status_code

    def _identity(self) -> tuple:
        return (self.status_code,)


class DecodingFailed(ShortcutError):
    description = "Decoding Failed"
    recovery_suggestion = "The shortcut data format may have changed. Try updating the library."

    def __init__(self, underlying: BaseException):
        super().__init__(f"Failed to decode the response: {underlying}")
        self.underlying = underlying


class ParsingFailed(ShortcutError):
    """The document is not a property list, or its top-level shape is wrong."""

    description = "Parsing Failed"
    recovery_suggestion = "The shortcut data format may have changed. Try updating the library."

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason

    def _identity(self) -> tuple:
        return (self.reason,)


class ResourceNotFound(ShortcutError):
    description = "Resource Not Found"
    recovery_suggestion = "Verify the shortcut ID or URL is correct."

    def __init__(self, resource: str):
        super().__init__(f"The resource '{resource}' could not be found.")
        self.resource = resource

    def _identity(self) -> tuple:
        return (self.resource,)
