"""Routers package."""

from . import (
    health,
    auth,
    clients,
    sessions,
    reports,
    share,
)
