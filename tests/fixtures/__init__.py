"""Shared pytest fixtures and helpers for books tests."""

from .api import *  # noqa: F401,F403
from .core import *  # noqa: F401,F403
