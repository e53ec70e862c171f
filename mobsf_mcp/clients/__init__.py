"""Backend clients for the MobSF REST API."""

from .mobsf_client import MobSFClient, create_mobsf_client

__all__ = [
    "MobSFClient",
    "create_mobsf_client",
]
