"""Interactive-auth surfaces: the UI side of the login flow.

The login flow never renders anything itself. It hands an InvokeOptions to a
surface and waits for an InvokeResult.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Protocol

from oidcflow.client.models.errors import UserAuthCancelledError
from oidcflow.client.models.invocation import InvokeOptions, InvokeResult

logger = logging.getLogger(__name__)

AuthorizationCallback = Callable[[str, InvokeOptions], Awaitable[str]]


class InteractiveAuthSurface(Protocol):
    """Protocol for the component that shows the provider's pages.

    Allows different strategies for user interaction:
    - Embedded webview watching for the redirect URI
    - System browser plus loopback listener or private-use URI scheme
    - Manual copy and paste for CLI tools
    """

    async def invoke(self, options: InvokeOptions) -> InvokeResult:
        """Open ``options.start_url`` and wait for the redirect.

        Args:
            options: Start URL, expected redirect URI and display hints

        Returns:
            Success with the raw callback payload, or the reason it failed
        """
        ...


class CallbackAuthSurface:
    """Surface that delegates the interaction to an async callable.

    The callable receives the start URL and the invocation options and
    returns the callback payload. It signals that the user gave up by raising
    UserAuthCancelledError. Any other exception is reported as a
    communication error.
    """

    def __init__(
        self,
        callback_handler: AuthorizationCallback,
        timeout: float | None = None,
    ):
        """Initialize callback surface.

        Args:
            callback_handler: Async function performing the interaction
            timeout: Seconds to wait before reporting a timeout; None waits
                indefinitely
        """
        self.callback_handler = callback_handler
        self.timeout = timeout

    async def invoke(self, options: InvokeOptions) -> InvokeResult:
        try:
            if self.timeout is None:
                response = await self.callback_handler(options.start_url, options)
            else:
                response = await asyncio.wait_for(
                    self.callback_handler(options.start_url, options), self.timeout
                )
        except asyncio.TimeoutError:
            logger.warning(f"Authorization interaction timed out after {self.timeout}s")
            return InvokeResult.timed_out(f"No response within {self.timeout} seconds")
        except UserAuthCancelledError as e:
            logger.info("User cancelled the authorization interaction")
            return InvokeResult.cancelled(str(e) or None)
        except Exception as e:
            logger.error(f"Authorization interaction failed: {e}")
            return InvokeResult.communication_error(str(e))

        if not isinstance(response, str):
            return InvokeResult.communication_error(
                f"Callback handler returned {type(response).__name__}, expected str"
            )

        return InvokeResult.success(response)
