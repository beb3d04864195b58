"""Entry points of the comments microservice."""
