"""SQLAlchemy persistence for the comments microservice."""
