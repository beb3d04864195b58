"""Migration modules, one schema change each.

Each module exposes ``MIGRATION_ID`` and ``upgrade(op)`` where ``op`` is an
``alembic.operations.Operations`` bound to the bootstrap connection.
"""
