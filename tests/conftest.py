"""Test configuration and fixtures for the Books API."""

from tests.fixtures import *  # noqa: F401,F403
