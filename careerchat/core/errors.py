from __future__ import annotations


class ChatProxyError(Exception):
    """Base error carrying the HTTP status surfaced to the caller."""

    status_code: int = 500

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code

    def to_body(self) -> dict[str, dict[str, str]]:
        return {"error": {"message": self.message}}


class ConfigurationError(ChatProxyError):
    status_code = 500


class MethodNotAllowedError(ChatProxyError):
    status_code = 405

    def __init__(self, allowed: tuple[str, ...] = ("POST",)) -> None:
        super().__init__("Method Not Allowed")
        self.allowed = allowed


class InvalidRequestError(ChatProxyError):
    status_code = 400


class UnexpectedError(ChatProxyError):
    status_code = 500


class UpstreamError(ChatProxyError):
    """Final non-2xx outcome from the chat-completion API."""

    def __init__(self, message: str, status_code: int, api_message: str) -> None:
        super().__init__(message, status_code=status_code)
        self.api_message = api_message


class UpstreamTransientError(UpstreamError):
    pass


class UpstreamAuthError(UpstreamError):
    pass


class UpstreamOtherError(UpstreamError):
    pass


def upstream_error(
    status_code: int,
    api_message: str,
    *,
    label: str = "OpenRouter",
    credential_name: str = "OPENROUTER_API_KEY",
) -> UpstreamError:
    if status_code in (401, 403):
        return UpstreamAuthError(
            f"{label} authentication failed ({status_code}). "
            f"Check {credential_name} permissions. Details: {api_message}",
            status_code=status_code,
            api_message=api_message,
        )
    message = f"{label} API error {status_code}: {api_message}"
    if status_code == 429 or status_code >= 500:
        return UpstreamTransientError(
            message, status_code=status_code, api_message=api_message
        )
    return UpstreamOtherError(message, status_code=status_code, api_message=api_message)
