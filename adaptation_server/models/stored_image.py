"""
Stored image model backing the blob store.
"""

from datetime import UTC, datetime
from uuid import uuid4

from sqlalchemy import DateTime, Integer, LargeBinary, String
from sqlalchemy.orm import Mapped, deferred, mapped_column

from .base import Base


class StoredImage(Base):
    """
    Binary image content keyed by a generated identifier.

    `data` is deferred so that existence checks and metadata lookups do not
    pull the image bytes.
    """

    __tablename__ = "stored_images"
    __table_args__ = {"extend_existing": True}

    id: Mapped[str] = mapped_column(String(length=36), primary_key=True, default=lambda: str(uuid4()))
    filename: Mapped[str] = mapped_column(String(length=512), unique=True, nullable=False)
    original_name: Mapped[str] = mapped_column(String(length=255), nullable=False)
    content_type: Mapped[str] = mapped_column(String(length=127), nullable=False)
    size: Mapped[int] = mapped_column(Integer, nullable=False)
    data: Mapped[bytes] = deferred(mapped_column(LargeBinary, nullable=False))
    uploaded_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=lambda: datetime.now(UTC)
    )

    def __repr__(self) -> str:
        return f"<StoredImage(id={self.id}, filename='{self.filename}', size={self.size})>"
