"""White-label directory clients."""

from .http import HttpWhiteLabelDirectory
from .memory import InMemoryWhiteLabelDirectory

__all__ = ["HttpWhiteLabelDirectory", "InMemoryWhiteLabelDirectory"]
