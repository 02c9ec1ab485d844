"""API routers for the ushering scheduler."""

from ushering.routers import churches, events, masses, ushers, zones  # noqa: F401
