"""
Clients for external systems.
"""

from integrations.api_client import ApiClient, SessionContext

__all__ = [
    "ApiClient",
    "SessionContext",
]
