"""Supabase Storage bucket for uploaded images."""

from dataclasses import dataclass

from supabase import Client

from farm_assistant.services.health import ImageStorage


@dataclass
class SupabaseImageStorage(ImageStorage):
    """Supabase Storage implementation for query images."""

    client: Client
    bucket: str

    def upload(self, path: str, content: bytes, content_type: str) -> str:
        """Upload bytes to the bucket and return their public URL."""
        storage = self.client.storage.from_(self.bucket)
        storage.upload(path, content, {"content-type": content_type})
        return storage.get_public_url(path)
