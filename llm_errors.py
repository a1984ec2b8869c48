# llm_errors.py
"""
Errors raised by the provider backends.

None of these reach the NPC: LlmManager turns each one into a fallback line.
"""
from typing import Optional


class LLMError(Exception):
    """Base error for provider calls."""

    def __init__(self, message: str, original_error: Optional[Exception] = None):
        self.message = message
        self.original_error = original_error
        super().__init__(self.message)

    def __str__(self):
        if self.original_error:
            return f"{self.message} (Caused by: {self.original_error})"
        return self.message


class ConfigurationError(LLMError):
    """The active provider is missing something it needs (key, url)."""


class ProviderConnectionError(LLMError):
    """The request never got an HTTP answer (DNS, refused, timeout)."""

    def __init__(self, provider_name: str, original_error: Optional[Exception] = None):
        self.provider_name = provider_name
        super().__init__(f"[{provider_name}] Could not reach the API", original_error)


class ProviderHTTPError(LLMError):
    """The API answered with a non-2xx status."""

    def __init__(self, provider_name: str, status_code: int, body: str = ""):
        self.provider_name = provider_name
        self.status_code = status_code
        self.body = body
        super().__init__(f"[{provider_name}] HTTP {status_code}")


class ResponseParseError(LLMError):
    """The API answered 2xx but the body had no usable reply text."""

    def __init__(self, provider_name: str, raw: str = "", original_error: Optional[Exception] = None):
        self.provider_name = provider_name
        self.raw = raw
        super().__init__(f"[{provider_name}] Unexpected response format", original_error)
