"""Invocation contract between the login flow and an interactive-auth surface.

A surface is whatever renders the provider's pages: an embedded webview, the
system browser with a loopback listener, or a test double.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class DisplayMode(str, Enum):
    """Initial visibility of the surface."""

    NORMAL = "normal"
    HIDDEN = "hidden"


class ResponseMode(str, Enum):
    """How the provider delivers the callback to the redirect URI."""

    REDIRECT = "redirect"
    FORM_POST = "form_post"


class InvokeResultType(str, Enum):
    SUCCESS = "success"
    USER_CANCELLED = "user_cancelled"
    TIMEOUT = "timeout"
    COMMUNICATION_ERROR = "communication_error"


@dataclass(frozen=True)
class InvokeOptions:
    """What the surface must open and which redirect ends the interaction."""

    start_url: str
    expected_redirect_uri: str
    display_mode: DisplayMode = DisplayMode.NORMAL
    response_mode: ResponseMode = ResponseMode.REDIRECT


@dataclass(frozen=True)
class InvokeResult:
    """Outcome of one surface invocation.

    ``response`` carries the raw callback payload (URL, fragment or form
    body) and is only set on success.
    """

    result_type: InvokeResultType
    response: str | None = None
    error: str | None = None

    def __post_init__(self) -> None:
        if self.result_type is InvokeResultType.SUCCESS and self.response is None:
            raise ValueError("Successful invocation requires a response payload")
        if self.result_type is not InvokeResultType.SUCCESS and self.response is not None:
            raise ValueError("Only successful invocations carry a response payload")

    @classmethod
    def success(cls, response: str) -> InvokeResult:
        return cls(InvokeResultType.SUCCESS, response=response)

    @classmethod
    def cancelled(cls, error: str | None = None) -> InvokeResult:
        return cls(InvokeResultType.USER_CANCELLED, error=error)

    @classmethod
    def timed_out(cls, error: str | None = None) -> InvokeResult:
        return cls(InvokeResultType.TIMEOUT, error=error)

    @classmethod
    def communication_error(cls, error: str | None = None) -> InvokeResult:
        return cls(InvokeResultType.COMMUNICATION_ERROR, error=error)

    def is_success(self) -> bool:
        return self.result_type is InvokeResultType.SUCCESS
