"""Startup orchestration.

The sequence is strictly ordered::

    settings -> persistence context -> schema READY -> registration -> serving

Schema bootstrap failures are fatal and propagate. Registration is
best-effort and only affects discoverability. Serving never starts before
the schema is ``READY``.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from contextlib import ExitStack
from dataclasses import dataclass
from typing import TypeVar

from comments_microservice.adapters.db.context import CommentContext
from comments_microservice.adapters.white_label import HttpWhiteLabelDirectory
from comments_microservice.config import Settings
from comments_microservice.contracts import (
    AddCommentContract,
    CommentContract,
    UpdateCommentContract,
)
from comments_microservice.domain import CommentEntity
from comments_microservice.interfaces.contract_logic import ContractLogic
from comments_microservice.interfaces.schema import (
    BootstrapReport,
    SchemaBootstrapError,
)
from comments_microservice.interfaces.white_label import WhiteLabelDirectory
from comments_microservice.service_layer import (
    ContractLogicResolver,
    WhiteLabelManager,
)

logger = logging.getLogger(__name__)

SERVICE_LABEL = "Comment"

T = TypeVar("T")

CommentLogic = ContractLogic[AddCommentContract, UpdateCommentContract, CommentContract]


@dataclass(frozen=True)
class AppContainer:
    """Everything the serving layer needs once startup has finished."""

    settings: Settings
    context: CommentContext
    schema: BootstrapReport
    registered: bool
    resolver: ContractLogicResolver
    comments: CommentLogic


def build_context(settings: Settings) -> CommentContext:
    """Build the persistence context for ``settings``."""
    return CommentContext(settings.db_url)


def build_resolver(context: CommentContext) -> ContractLogicResolver:
    """Build a resolver with the comment contracts bound."""
    resolver = ContractLogicResolver(context.unit_of_work)
    resolver.bind(
        CommentEntity,
        AddCommentContract,
        UpdateCommentContract,
        CommentContract,
        created_field="creation_date_time",
        modified_field="modification_date_time",
    )
    return resolver


def build_directory(settings: Settings) -> WhiteLabelDirectory:
    """Build the HTTP directory client, bounded by the registration timeout."""
    return HttpWhiteLabelDirectory(timeout=settings.registration_timeout)


def bootstrap(
    settings: Settings, *, directory: WhiteLabelDirectory | None = None
) -> AppContainer:
    """Run startup up to, but not including, serving.

    Args:
        settings: Startup configuration.
        directory: White-label directory client; defaults to the HTTP client.

    Returns:
        The assembled application.

    Raises:
        SchemaBootstrapError: If the schema cannot be brought to ``READY``.
    """
    context = build_context(settings)
    with ExitStack() as cleanup:
        # disposed on any failure before the container is returned
        cleanup.callback(context.dispose)
        try:
            report = context.bootstrapper().run()
        except SchemaBootstrapError:
            logger.critical("Schema bootstrap failed; the service will not start")
            raise

        manager = WhiteLabelManager(directory or build_directory(settings))
        registered = manager.initialize(
            SERVICE_LABEL, settings.white_label_address, type(context)
        )

        resolver = build_resolver(context)
        comments = resolver.resolve(
            CommentEntity, AddCommentContract, UpdateCommentContract, CommentContract
        )
        cleanup.pop_all()

    logger.info(
        "%s service up (discoverable=%s)", SERVICE_LABEL, "yes" if registered else "no"
    )
    return AppContainer(
        settings=settings,
        context=context,
        schema=report,
        registered=registered,
        resolver=resolver,
        comments=comments,
    )


def run(
    settings: Settings,
    serve: Callable[[AppContainer], T],
    *,
    directory: WhiteLabelDirectory | None = None,
) -> T:
    """Bootstrap, then hand the application to the serving layer.

    The persistence context is disposed when ``serve`` returns or raises.
    """
    container = bootstrap(settings, directory=directory)
    try:
        return serve(container)
    finally:
        container.context.dispose()
