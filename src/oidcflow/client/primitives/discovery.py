"""Provider information sources.

Implements OpenID Connect Discovery 1.0 to find the authorize and
end-session endpoints, plus a static source for providers configured by hand.
"""

from __future__ import annotations

import logging
from typing import Protocol
from urllib.parse import urlparse

import httpx
from pydantic import ValidationError

from oidcflow.client.models.discovery import OpenIDProviderMetadata, ProviderInfo
from oidcflow.client.models.errors import ProviderUnavailableError

logger = logging.getLogger(__name__)

WELL_KNOWN_PATH = "/.well-known/openid-configuration"


class ProviderInfoSource(Protocol):
    """Anything able to resolve the provider endpoints."""

    async def get_provider_information(self) -> ProviderInfo:
        """Return the provider endpoints.

        Raises:
            ProviderUnavailableError: If the endpoints cannot be resolved
        """
        ...


class StaticProviderInfoSource:
    """ProviderInfoSource for endpoints known ahead of time."""

    def __init__(self, provider_info: ProviderInfo):
        self._provider_info = provider_info

    async def get_provider_information(self) -> ProviderInfo:
        return self._provider_info


class OidcDiscovery:
    """Resolves provider endpoints from the issuer's discovery document.

    The document is fetched once per instance and cached; failed fetches are
    not cached so a later attempt retries.
    """

    def __init__(
        self,
        authority: str,
        timeout: float = 30.0,
        http_client: httpx.AsyncClient | None = None,
    ):
        """Initialize OIDC discovery.

        Args:
            authority: Issuer URL, with or without a path component
            timeout: HTTP request timeout in seconds
            http_client: Optional preconfigured client (proxies, test transports)
        """
        self.authority = authority.rstrip("/")
        self.timeout = timeout
        self._owns_client = http_client is None
        self._http_client = http_client or httpx.AsyncClient(timeout=timeout)
        self._metadata: OpenIDProviderMetadata | None = None

    @property
    def discovery_url(self) -> str:
        return f"{self.authority}{WELL_KNOWN_PATH}"

    async def get_provider_information(self) -> ProviderInfo:
        metadata = await self.get_metadata()
        return metadata.to_provider_info()

    async def get_metadata(self) -> OpenIDProviderMetadata:
        """Fetch and validate the provider metadata document.

        Raises:
            ProviderUnavailableError: If the fetch or validation fails
        """
        if self._metadata is not None:
            return self._metadata

        url = self.discovery_url
        try:
            logger.debug(f"Fetching OpenID provider metadata from: {url}")
            response = await self._http_client.get(url)
            response.raise_for_status()

            metadata = OpenIDProviderMetadata.model_validate_json(response.text)

        except httpx.HTTPStatusError as e:
            raise ProviderUnavailableError(
                f"Failed to fetch provider metadata from {url}: {e}"
            ) from e
        except httpx.HTTPError as e:
            raise ProviderUnavailableError(
                f"HTTP error fetching provider metadata from {url}: {e}"
            ) from e
        except ValidationError as e:
            raise ProviderUnavailableError(
                f"Invalid provider metadata from {url}: {e}"
            ) from e

        self._validate_issuer(metadata)

        logger.debug(f"Successfully discovered provider metadata for {metadata.issuer}")
        self._metadata = metadata
        return metadata

    def _validate_issuer(self, metadata: OpenIDProviderMetadata) -> None:
        """OpenID Connect Discovery 1.0 Section 4.3: issuer must match the authority."""
        issuer = metadata.issuer.rstrip("/")
        if issuer != self.authority:
            expected = urlparse(self.authority)
            actual = urlparse(issuer)
            # Tolerate case differences in scheme and host only
            if (
                expected.scheme.lower() != actual.scheme.lower()
                or expected.netloc.lower() != actual.netloc.lower()
                or expected.path != actual.path
            ):
                raise ProviderUnavailableError(
                    f"Issuer mismatch: expected {self.authority}, got {metadata.issuer}"
                )

    async def close(self) -> None:
        """Close the HTTP client if this instance created it."""
        if self._owns_client:
            await self._http_client.aclose()
