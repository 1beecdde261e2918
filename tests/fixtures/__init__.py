"""Shared pytest fixtures for the bridge tests."""

from .core import *  # noqa: F401,F403
from .services import *  # noqa: F401,F403
