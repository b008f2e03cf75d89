"""Request routing and the services it delegates to."""

from forgetmeknots.services.router import OPERATIONS, RequestRouter

__all__ = ["OPERATIONS", "RequestRouter"]
