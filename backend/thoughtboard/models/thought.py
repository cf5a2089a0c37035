import uuid
from datetime import datetime
from sqlalchemy import String, Text, Float, DateTime, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship
from thoughtboard.database import Base, utcnow
from thoughtboard.codecs import ThoughtType  # noqa: F401


class Thought(Base):
    """
    A card on a board.

    ``content`` depends on ``type``: plain text, a URL, an image data URI,
    a JSON-encoded checklist or a sketch data URI. ``metadata`` is kept as
    JSON text and parsed by the codec layer on every read.
    """
    __tablename__ = "thoughts"

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4)
    board_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("boards.id", ondelete="CASCADE"), nullable=False, index=True
    )
    type: Mapped[str] = mapped_column(String(20), nullable=False)
    content: Mapped[str | None] = mapped_column(Text, nullable=True, default="")
    x: Mapped[float] = mapped_column(Float, nullable=False)
    y: Mapped[float] = mapped_column(Float, nullable=False)
    color: Mapped[str | None] = mapped_column(String(32), nullable=True)
    width: Mapped[float | None] = mapped_column(Float, nullable=True)
    height: Mapped[float | None] = mapped_column(Float, nullable=True)
    # "metadata" is reserved on declarative classes
    metadata_json: Mapped[str | None] = mapped_column("metadata", Text, nullable=True, default="{}")
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)

    # Relationships
    board = relationship("Board", back_populates="thoughts")
