"""Bootstrap (composition root) for the comments microservice.

Assembles the application at runtime: builds the persistence context from
explicit settings, brings the schema to ``READY``, registers with the
white-label directory, and resolves the comment contract logic.

Import rules:
- Entry points import *this* package (not adapters/service_layer/interfaces/domain).
- This package may import every other package of the project.
- Inner layers must not import `comments_microservice.bootstrap`.
"""

from .bootstrap import AppContainer, bootstrap, run

__all__ = ["AppContainer", "bootstrap", "run"]
