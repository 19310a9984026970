"""Clients for the hosted backend (rows, RPC, auth and storage)."""

from agrom.integrations.base import BaseIntegration
from agrom.integrations.storage import StorageClient, UploadedImage
from agrom.integrations.supabase import SupabaseClient

__all__ = [
    "BaseIntegration",
    "StorageClient",
    "SupabaseClient",
    "UploadedImage",
]
