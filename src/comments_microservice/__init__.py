"""Comments Microservice

A single-purpose comment-storage service. It provisions a relational
persistence context, binds the comment entity to its add/update/read
contracts, brings the schema to a fully migrated state at startup, and
announces itself to the white-label directory so other services can find it.
"""

__all__ = ["__version__"]
__version__ = "0.1.0"
