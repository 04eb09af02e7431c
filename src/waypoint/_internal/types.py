"""Shared type aliases used across waypoint modules."""

from collections.abc import Callable
from typing import Any, TypeAlias

# Not-found handler: receives (request?) and returns a response value
NotFoundHandler: TypeAlias = Callable[..., Any]

# Error handler: receives (request?, error?) and returns a response value
ErrorHandler: TypeAlias = Callable[..., Any]
