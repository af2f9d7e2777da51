"""
Database-backed blob store for creature images.

Images are written as single rows in the stored_images table. Each write and
read is bounded by a configurable time budget because a stalled database
must not hold an API request open indefinitely. Nothing here retries: a
failed or timed-out operation is reported to the caller once, and partially
written data left behind by an abandoned write is not cleaned up.
"""

import asyncio
import secrets
import string
import time
from typing import NamedTuple
from uuid import uuid4

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.orm import undefer

from ..config.models import BlobStoreConfig
from ..error_types import ErrorMessages
from ..exceptions import ResourceNotFoundError, StorageError, StorageTimeoutError, ValidationError
from ..models.stored_image import StoredImage
from ..structured_logging.enhanced_logging_config import get_logger
from ..utils.error_logging import create_error_context, log_and_raise
from ..utils.id_utils import normalize_identifier

logger = get_logger(__name__)

_SUFFIX_ALPHABET = string.digits + string.ascii_lowercase
_SUFFIX_LENGTH = 13
DEFAULT_CONTENT_TYPE = "application/octet-stream"


class BlobContent(NamedTuple):
    """Bytes and content type of a stored image."""

    content: bytes
    content_type: str


def generate_filename(original_name: str) -> str:
    """
    Build a collision-resistant storage name.

    Format: <epoch-millis>-<13 random base36 chars>-<original name>, so two
    uploads of "photo.png" in the same millisecond still get distinct names.
    """
    suffix = "".join(secrets.choice(_SUFFIX_ALPHABET) for _ in range(_SUFFIX_LENGTH))
    return f"{int(time.time() * 1000)}-{suffix}-{original_name}"


class BlobStore:
    """
    Stores, retrieves and deletes image bytes by generated identifier.

    The store shares the application's session maker; each operation opens
    its own short-lived session.
    """

    def __init__(self, session_maker: async_sessionmaker[AsyncSession], config: BlobStoreConfig):
        self._session_maker = session_maker
        self.config = config
        self._logger = get_logger(__name__)

    @property
    def enabled(self) -> bool:
        """True when a read/write token is configured and uploads are accepted."""
        return self.config.enabled

    @property
    def max_upload_bytes(self) -> int:
        return self.config.max_upload_bytes

    def validate(self, content: bytes, content_type: str, max_size: int | None = None) -> None:
        """
        Check size and content type without touching storage.

        Raises:
            ValidationError: If the content is too large or not an image
        """
        limit = self.config.max_upload_bytes if max_size is None else max_size
        if len(content) > limit:
            raise ValidationError(
                f"File too large: {len(content)} bytes exceeds limit of {limit} bytes",
                field="file",
                details={"size": len(content), "max_size": limit},
                user_friendly=ErrorMessages.FILE_TOO_LARGE.format(max_mb=f"{limit / (1024 * 1024):g}"),
            )
        if not content_type or not content_type.startswith("image/"):
            raise ValidationError(
                f"Invalid content type '{content_type}'; only images are allowed",
                field="file",
                value=content_type,
                user_friendly=ErrorMessages.INVALID_FILE_TYPE,
            )

    async def store(self, content: bytes, name: str, content_type: str, max_size: int | None = None) -> str:
        """
        Persist image bytes and return the generated identifier.

        Args:
            content: Raw image bytes
            name: Original file name
            content_type: MIME type; must start with "image/"
            max_size: Size limit in bytes (defaults to the configured upload limit)

        Returns:
            str: Identifier of the stored image

        Raises:
            ValidationError: If content is too large or not an image (nothing is written)
            StorageTimeoutError: If the write exceeds the write budget
            StorageError: If the database rejects the write
        """
        self.validate(content, content_type, max_size)

        image = StoredImage(
            id=str(uuid4()),
            filename=generate_filename(name),
            original_name=name,
            content_type=content_type,
            size=len(content),
            data=content,
        )
        context = create_error_context()
        context.metadata.update({"operation": "store_image", "original_name": name, "size": len(content)})

        self._logger.info("Storing image", original_name=name, size=len(content), content_type=content_type)
        try:
            await asyncio.wait_for(self._write(image), timeout=self.config.write_timeout_seconds)
        except TimeoutError:
            log_and_raise(
                StorageTimeoutError,
                f"Image write exceeded {self.config.write_timeout_seconds}s",
                context=context,
                details={"original_name": name, "size": len(content)},
                user_friendly="Upload timed out",
                operation="store",
                timeout_seconds=self.config.write_timeout_seconds,
            )
        except (SQLAlchemyError, OSError) as e:
            log_and_raise(
                StorageError,
                f"Failed to store image '{name}': {e}",
                context=context,
                details={"original_name": name, "error": str(e)},
                user_friendly="Failed to store image",
                operation="store",
            )

        self._logger.info("Image stored", image_id=image.id, filename=image.filename)
        return image.id

    async def _write(self, image: StoredImage) -> None:
        async with self._session_maker() as session:
            session.add(image)
            await session.commit()

    async def retrieve(self, identifier: str) -> BlobContent:
        """
        Load image bytes and content type.

        Raises:
            ResourceNotFoundError: If the identifier does not resolve to stored content
            StorageTimeoutError: If the read exceeds the read budget
            StorageError: If the database read fails
        """
        lookup_id = normalize_identifier(identifier)
        if lookup_id is None:
            raise ResourceNotFoundError(
                f"File not found: {identifier}", resource_type="image", resource_id=str(identifier)
            )

        context = create_error_context()
        context.metadata.update({"operation": "retrieve_image", "image_id": identifier})
        try:
            image = await asyncio.wait_for(self._read(lookup_id), timeout=self.config.read_timeout_seconds)
        except TimeoutError:
            log_and_raise(
                StorageTimeoutError,
                f"Image read exceeded {self.config.read_timeout_seconds}s",
                context=context,
                details={"image_id": identifier},
                user_friendly="Image retrieval timed out",
                operation="retrieve",
                timeout_seconds=self.config.read_timeout_seconds,
            )
        except (SQLAlchemyError, OSError) as e:
            log_and_raise(
                StorageError,
                f"Failed to retrieve image '{identifier}': {e}",
                context=context,
                details={"image_id": identifier, "error": str(e)},
                user_friendly="Failed to retrieve image",
                operation="retrieve",
            )

        if image is None:
            raise ResourceNotFoundError(
                f"File not found: {identifier}", context=context, resource_type="image", resource_id=identifier
            )
        return BlobContent(content=image.data, content_type=image.content_type or DEFAULT_CONTENT_TYPE)

    async def _read(self, identifier: str) -> StoredImage | None:
        async with self._session_maker() as session:
            stmt = select(StoredImage).options(undefer(StoredImage.data)).where(StoredImage.id == identifier)
            result = await session.execute(stmt)
            return result.scalar_one_or_none()

    async def delete(self, identifier: str) -> bool:
        """
        Delete stored image bytes.

        Never raises: callers treat image deletion as best-effort, so every
        failure is logged and reported as False.

        Returns:
            bool: True if an image was removed, False otherwise
        """
        lookup_id = normalize_identifier(identifier)
        if lookup_id is None:
            self._logger.warning("Refusing to delete image with malformed id", image_id=identifier)
            return False
        try:
            deleted = await asyncio.wait_for(self._remove(lookup_id), timeout=self.config.write_timeout_seconds)
        except Exception as e:  # pylint: disable=broad-exception-caught  # Reason: deletion is best-effort and must never propagate
            self._logger.error("Error deleting image", image_id=identifier, error=str(e), error_type=type(e).__name__)
            return False

        if not deleted:
            self._logger.warning("Image not found for deletion", image_id=identifier)
            return False
        self._logger.info("Image deleted", image_id=identifier)
        return True

    async def _remove(self, identifier: str) -> bool:
        async with self._session_maker() as session:
            result = await session.execute(delete(StoredImage).where(StoredImage.id == identifier))
            await session.commit()
            return (result.rowcount or 0) > 0
