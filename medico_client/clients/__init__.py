"""
Clients for the remote service and object storage.
"""

from .credentials import ICredentialStore, InMemoryCredentialStore
from .medico_api_client import MedicoAPIClient
from .object_storage_client import ObjectStorageClient

__all__ = [
    "ICredentialStore",
    "InMemoryCredentialStore",
    "MedicoAPIClient",
    "ObjectStorageClient",
]
