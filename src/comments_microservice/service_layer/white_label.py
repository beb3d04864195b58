"""White-label registration.

:class:`WhiteLabelManager` announces this service to the directory. It is
best-effort: an empty address or a failed call is logged at WARNING and
reported by the return value, never raised. Startup continues either way and
nothing is retried within the same process; restart to try again.
"""

from __future__ import annotations

import logging

from comments_microservice.interfaces.white_label import (
    RegistrationDescriptor,
    RegistrationError,
    WhiteLabelDirectory,
)

logger = logging.getLogger(__name__)

# pylint: disable=too-few-public-methods


class WhiteLabelManager:
    """Registers service instances with a white-label directory."""

    def __init__(self, directory: WhiteLabelDirectory) -> None:
        self.directory = directory

    def initialize(
        self, service_label: str, directory_address: str, context_type: type
    ) -> bool:
        """Register ``service_label`` for ``context_type`` at ``directory_address``.

        Args:
            service_label: Name the service is discovered under, e.g. ``"Comment"``.
            directory_address: Base address of the directory; may be empty.
            context_type: Persistence context class; its name identifies the
                context in the directory.

        Returns:
            True if the directory accepted the registration, otherwise False.
        """
        if not (address := directory_address.strip()):
            logger.warning(
                "No white-label directory configured; %s will not be discoverable",
                service_label,
            )
            return False

        descriptor = RegistrationDescriptor(
            service_name=service_label,
            directory_address=address,
            context_type_identifier=context_type.__name__,
        )
        try:
            self.directory.register(descriptor)
        except RegistrationError as e:
            logger.warning(
                "White-label registration of %s failed (%s); serving without discovery",
                service_label,
                e,
            )
            return False

        logger.info(
            "Registered %s/%s with white-label directory %s",
            descriptor.service_name,
            descriptor.context_type_identifier,
            address,
        )
        return True
