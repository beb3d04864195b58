"""HTTP white-label directory client.

Registration is a single idempotent ``PUT``::

    PUT {directory}/api/whitelabel/microservices/{service}/contexts/{context}
    {"service_name": ..., "directory_address": ..., "context_type_identifier": ...}

The directory upserts by ``(service, context)``. Any 2xx status is success;
the response body is ignored. Malformed addresses, transport errors, timeouts
and other statuses are raised as :class:`RegistrationError`.
"""

from __future__ import annotations

import logging
from urllib.parse import quote

import httpx

from comments_microservice import __version__
from comments_microservice.interfaces.white_label import (
    RegistrationDescriptor,
    RegistrationError,
    WhiteLabelDirectory,
)

logger = logging.getLogger(__name__)

REGISTER_PATH = "/api/whitelabel/microservices/{service}/contexts/{context}"
USER_AGENT = f"comments-microservice/{__version__}"
MAX_PORT = 65535


class HttpWhiteLabelDirectory(WhiteLabelDirectory):
    """Directory client over HTTP.

    Args:
        timeout: Upper bound, in seconds, for the whole registration call.
        transport: Optional httpx transport (tests pass ``httpx.MockTransport``).
    """

    def __init__(
        self, timeout: float = 5.0, transport: httpx.BaseTransport | None = None
    ) -> None:
        self.timeout = timeout
        self._transport = transport

    def register(self, descriptor: RegistrationDescriptor) -> None:
        url = self.registration_url(descriptor)
        logger.debug("PUT %s", url)
        try:
            with httpx.Client(
                timeout=self.timeout,
                transport=self._transport,
                headers={"User-Agent": USER_AGENT},
            ) as client:
                response = client.put(url, json=descriptor.as_payload())
                response.raise_for_status()
        except httpx.TimeoutException as e:
            raise RegistrationError(
                f"Directory at {descriptor.directory_address} timed out after "
                f"{self.timeout}s"
            ) from e
        except httpx.HTTPStatusError as e:
            raise RegistrationError(
                f"Directory rejected registration: HTTP {e.response.status_code}"
            ) from e
        except httpx.HTTPError as e:
            raise RegistrationError(
                f"Directory at {descriptor.directory_address} unreachable: {e}"
            ) from e
        except httpx.InvalidURL as e:
            # not an HTTPError subclass
            raise RegistrationError(f"Invalid directory address: {e}") from e

    @staticmethod
    def registration_url(descriptor: RegistrationDescriptor) -> str:
        """Absolute registration URL for ``descriptor``.

        Raises:
            RegistrationError: If the directory address is not an absolute
                http(s) URL with a valid port.
        """
        base = descriptor.directory_address.rstrip("/")
        try:
            parsed = httpx.URL(base)
        except httpx.InvalidURL as e:
            raise RegistrationError(f"Invalid directory address: {base!r} ({e})") from e
        if parsed.scheme not in ("http", "https") or not parsed.host:
            raise RegistrationError(f"Invalid directory address: {base!r}")
        if parsed.port is not None and not 0 < parsed.port <= MAX_PORT:
            raise RegistrationError(f"Invalid directory address: {base!r} (bad port)")
        return base + REGISTER_PATH.format(
            service=quote(descriptor.service_name, safe=""),
            context=quote(descriptor.context_type_identifier, safe=""),
        )
