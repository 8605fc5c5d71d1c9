"""HTTP clients for external stats services."""

from clients.opendota import OpenDotaAPIError, OpenDotaClient

__all__ = ["OpenDotaAPIError", "OpenDotaClient"]
