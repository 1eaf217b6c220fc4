"""
Object storage client for blog_api media (avatars, thumbnails).

Wraps any Django storage backend. Keys are random so two uploads never
collide; the public URL is whatever the backend reports for the key.
"""
import logging
import os
import uuid
from collections import namedtuple

from django.core.files.base import ContentFile
from django.core.files.storage import storages

from .conf import blog_settings
from .exceptions import StorageError

logger = logging.getLogger(__name__)

UploadedAsset = namedtuple("UploadedAsset", ["key", "url"])


class ObjectStorageClient:
    """
    Upload and delete binary assets.

    Args:
        storage: Django Storage instance. Defaults to the storage alias
            named by the STORAGE_ALIAS setting.
    """

    def __init__(self, storage=None):
        self.storage = storage or storages[blog_settings.STORAGE_ALIAS]

    @staticmethod
    def generate_key(original_name, prefix=""):
        """Return a unique key that keeps the original file extension."""
        extension = os.path.splitext(original_name or "")[1].lower()
        return f"{prefix}{uuid.uuid4().hex}{extension}"

    def upload(self, content, original_name, content_type, prefix=""):
        """
        Store bytes under a freshly generated key.

        Args:
            content: raw bytes, or a file-like object (e.g. UploadedFile)
            original_name: client file name, used for the extension only
            content_type: MIME type as supplied by the client
            prefix: key prefix such as "avatars/"

        Returns:
            UploadedAsset(key, url)
        """
        if hasattr(content, "read"):
            content.seek(0)
            content = content.read()

        key = self.generate_key(original_name, prefix)
        payload = ContentFile(content, name=key)
        payload.content_type = content_type

        try:
            saved_key = self.storage.save(key, payload)
            url = self.storage.url(saved_key)
        except Exception as exc:
            logger.error("Upload of %s failed: %s", key, exc)
            raise StorageError("Failed to upload file") from exc

        logger.info("Uploaded %s (%s, %d bytes)", saved_key, content_type, len(content))
        return UploadedAsset(saved_key, url)

    def upload_file(self, uploaded_file, prefix=""):
        """Upload a Django UploadedFile, keeping its name and content type."""
        return self.upload(
            uploaded_file,
            uploaded_file.name,
            getattr(uploaded_file, "content_type", None) or "application/octet-stream",
            prefix=prefix,
        )

    def delete(self, key):
        """Remove the object stored under ``key``."""
        try:
            self.storage.delete(key)
        except Exception as exc:
            logger.error("Delete of %s failed: %s", key, exc)
            raise StorageError("Failed to delete file") from exc
        logger.info("Deleted %s", key)

    def discard(self, key):
        """
        Delete a replaced asset without failing the caller.

        Used after a new avatar/thumbnail is saved; a leftover object is
        logged and left behind.
        """
        if not key or not blog_settings.DELETE_REPLACED_ASSETS:
            return
        try:
            self.delete(key)
        except StorageError:
            logger.warning("Could not remove replaced asset %s", key)
