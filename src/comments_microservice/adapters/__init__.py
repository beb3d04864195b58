"""Concrete adapters: SQLAlchemy persistence and the white-label directory clients."""
