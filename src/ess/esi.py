# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Character name lookup through the EVE Swagger Interface (ESI)."""

import logging
import threading
from dataclasses import dataclass

import httpx

from ess.config import (
    DEFAULT_TIMEOUT_SECONDS,
    ESI_DATASOURCE,
    ESI_DEFAULT_BASE_URL,
    USER_AGENT,
)
from ess.lookup_client import (
    ClientBuildError,
    NotFoundError,
    ParseError,
    TransportError,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EsiCharacterResponse:
    """Represent the fields read from an ESI character payload."""

    name: str
    corporation_id: int
    birthday: str | None = None


class EsiClient:
    """Look up character names with the public ESI characters endpoint."""

    def __init__(
        self,
        base_url: str = ESI_DEFAULT_BASE_URL,
        datasource: str = ESI_DATASOURCE,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """Initialize client configuration.

        Args:
            base_url: ESI base URL, without the ``/characters`` suffix.
            datasource: ESI datasource query parameter.
            timeout_seconds: Per-request timeout.
            transport: Optional httpx transport override.
        """
        self._base_url = base_url.rstrip("/")
        self._datasource = datasource
        self._timeout_seconds = timeout_seconds
        self._transport = transport
        self._client: httpx.Client | None = None
        self._client_lock = threading.Lock()

    def lookup_name(self, identifier: str) -> str:
        """Fetch the character name for ``identifier``.

        Args:
            identifier: Character identifier.

        Returns:
            Character name.

        Raises:
            NotFoundError: If ESI answers 404.
            TransportError: If the request fails or ESI answers another non-2xx.
            ParseError: If the response body is not a character payload.
            ClientBuildError: If the HTTP client cannot be created.
        """
        client = self._get_client()
        try:
            response = client.get(
                f"/characters/{identifier}/",
                params={"datasource": self._datasource},
            )
        except (httpx.HTTPError, httpx.InvalidURL, OSError) as exc:
            logger.warning(
                f"ESI request failed (base_url={self._base_url} "
                f"identifier={identifier} error={exc})"
            )
            raise TransportError(f"Request failed: {exc}") from exc

        if response.status_code == 404:
            raise NotFoundError("Character not found")
        if not response.is_success:
            logger.warning(
                f"ESI returned an error status (identifier={identifier} "
                f"status={response.status_code})"
            )
            raise TransportError(
                f"HTTP {response.status_code} {response.reason_phrase}".strip()
            )

        try:
            character = _parse_character(response.json())
        except ValueError as exc:
            logger.warning(
                f"ESI response could not be parsed (identifier={identifier} error={exc})"
            )
            raise ParseError(f"Parse error: {exc}") from exc
        return character.name

    def close(self) -> None:
        """Close the underlying HTTP client, if one was created."""
        with self._client_lock:
            if self._client is not None:
                self._client.close()
                self._client = None

    def _get_client(self) -> httpx.Client:
        """Get or initialize the httpx client.

        Returns:
            Initialized httpx client.

        Raises:
            ClientBuildError: If client initialization fails.
        """
        client = self._client
        if client is not None:
            return client
        with self._client_lock:
            if self._client is not None:
                return self._client
            try:
                self._client = httpx.Client(
                    base_url=self._base_url,
                    timeout=self._timeout_seconds,
                    headers={"User-Agent": USER_AGENT, "Accept": "application/json"},
                    transport=self._transport,
                )
            except (httpx.InvalidURL, OSError, TypeError, ValueError) as exc:
                logger.warning(
                    f"HTTP client initialization failed (base_url={self._base_url} error={exc})"
                )
                raise ClientBuildError(f"Client error: {exc}") from exc
            return self._client


def _parse_character(payload: object) -> EsiCharacterResponse:
    """Validate an ESI character payload.

    Args:
        payload: Decoded JSON body.

    Returns:
        Parsed character response.

    Raises:
        ValueError: If required fields are missing or have the wrong type.
    """
    if not isinstance(payload, dict):
        raise ValueError(f"expected a JSON object, got {type(payload).__name__}")
    name = payload.get("name")
    if not isinstance(name, str):
        raise ValueError("missing field `name`")
    corporation_id = payload.get("corporation_id")
    if isinstance(corporation_id, bool) or not isinstance(corporation_id, int):
        raise ValueError("missing field `corporation_id`")
    birthday = payload.get("birthday")
    if birthday is not None and not isinstance(birthday, str):
        raise ValueError("invalid field `birthday`")
    return EsiCharacterResponse(
        name=name, corporation_id=corporation_id, birthday=birthday
    )
