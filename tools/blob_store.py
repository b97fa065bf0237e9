"""
Blob Store Tool
Stores proof photos and hands back a resolvable URL.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import Dict, Optional

from config import settings
from errors import PersistenceError, InputValidationError


logger = logging.getLogger(__name__)


@dataclass
class ProofUpload:
    """A proof photo supplied with a taken-event"""
    filename: str
    content: bytes
    content_type: Optional[str] = None

    @property
    def extension(self) -> str:
        suffix = PurePosixPath(self.filename or "").suffix.lower()
        return suffix if suffix and len(suffix) <= 8 else ""


class BlobStore(ABC):
    """Interface to the hosted object storage used for proof photos"""

    @abstractmethod
    async def upload(self, path: str, data: bytes, content_type: Optional[str] = None) -> str:
        """Persist ``data`` under ``path`` and return its public URL"""

    @abstractmethod
    async def delete(self, path: str) -> None:
        """Remove a stored object (used by cleanup jobs)"""


def _validate_path(path: str) -> PurePosixPath:
    posix = PurePosixPath(path)
    if posix.is_absolute() or ".." in posix.parts or not posix.parts:
        raise InputValidationError(f"Invalid blob path: {path!r}")
    return posix


class LocalBlobStore(BlobStore):
    """
    Filesystem-backed blob store.

    Objects live at ``<root>/<bucket>/<path>`` and are addressed by
    ``<base_url>/<bucket>/<path>``.
    """

    def __init__(
        self,
        root: Optional[str] = None,
        bucket: Optional[str] = None,
        base_url: Optional[str] = None
    ):
        self.root = Path(root or settings.BLOB_STORAGE_DIR)
        self.bucket = bucket or settings.PROOF_BUCKET
        self.base_url = (base_url or settings.PUBLIC_BLOB_BASE_URL).rstrip("/")

    def _target(self, path: str) -> Path:
        return self.root / self.bucket / Path(*_validate_path(path).parts)

    def public_url(self, path: str) -> str:
        return f"{self.base_url}/{self.bucket}/{_validate_path(path).as_posix()}"

    async def upload(self, path: str, data: bytes, content_type: Optional[str] = None) -> str:
        target = self._target(path)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            # Existing objects are never overwritten
            with open(target, "xb") as fh:
                fh.write(data)
        except FileExistsError as e:
            raise PersistenceError(f"Blob already exists: {path}") from e
        except OSError as e:
            raise PersistenceError(f"Blob upload failed for {path}: {e}") from e

        logger.info(f"Stored proof blob {path} ({len(data)} bytes)")
        return self.public_url(path)

    async def delete(self, path: str) -> None:
        try:
            self._target(path).unlink(missing_ok=True)
        except OSError as e:
            raise PersistenceError(f"Blob delete failed for {path}: {e}") from e


class InMemoryBlobStore(BlobStore):
    """Dictionary-backed store for tests and local demos"""

    def __init__(self, base_url: str = "memory://proofs"):
        self.base_url = base_url.rstrip("/")
        self.objects: Dict[str, bytes] = {}

    async def upload(self, path: str, data: bytes, content_type: Optional[str] = None) -> str:
        key = _validate_path(path).as_posix()
        if key in self.objects:
            raise PersistenceError(f"Blob already exists: {path}")
        self.objects[key] = data
        return f"{self.base_url}/{key}"

    async def delete(self, path: str) -> None:
        self.objects.pop(_validate_path(path).as_posix(), None)


# Singleton instance
blob_store = LocalBlobStore()
