"""
Settings package for bakery_server.

`bakery_server.settings` resolves to the environment-driven base settings;
`bakery_server.settings.test` overrides them for the test suite.
"""
from .base import *  # noqa: F401,F403
