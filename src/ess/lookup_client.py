# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Name lookup client abstractions."""

import logging
from typing import Protocol

logger = logging.getLogger(__name__)


class LookupFailure(RuntimeError):
    """Represent a name lookup failure for one identifier."""


class NotFoundError(LookupFailure):
    """The lookup service does not know the identifier."""


class TransportError(LookupFailure):
    """The request failed or returned an unexpected HTTP status."""


class ParseError(LookupFailure):
    """The response body does not have the expected shape."""


class ClientBuildError(LookupFailure):
    """The HTTP client could not be created."""


class LookupClient(Protocol):
    """Define name lookup behavior for a provider client."""

    def lookup_name(self, identifier: str) -> str:
        """Look up the display name for an identifier.

        Args:
            identifier: Character identifier extracted from a settings file.

        Returns:
            Display name.

        Raises:
            LookupFailure: If the lookup fails or the response is malformed.
        """
