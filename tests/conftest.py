"""Global pytest fixtures for the comments microservice."""

pytest_plugins = [
    "tests.fixtures.sqlite",
    "tests.fixtures.comments",
]
