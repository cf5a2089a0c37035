import uuid
from datetime import datetime
from sqlalchemy import String, Text, DateTime, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship
from thoughtboard.database import Base, utcnow


class Board(Base):
    """A canvas owned by exactly one user"""
    __tablename__ = "boards"

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True, default="")
    # URI or data URI
    cover_image: Mapped[str | None] = mapped_column(Text, nullable=True)
    background_image: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)

    # Relationships
    owner = relationship("User", back_populates="boards")
    thoughts = relationship(
        "Thought", back_populates="board", cascade="all, delete-orphan", passive_deletes=True
    )
    connections = relationship(
        "Connection", back_populates="board", cascade="all, delete-orphan", passive_deletes=True
    )
