"""Shared pytest fixtures for the products API tests."""

from .core import *  # noqa: F401,F403
