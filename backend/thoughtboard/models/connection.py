import uuid
from sqlalchemy import ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship
from thoughtboard.database import Base


class Connection(Base):
    """Edge between two thoughts of the same board"""
    __tablename__ = "connections"

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4)
    board_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("boards.id", ondelete="CASCADE"), nullable=False, index=True
    )
    from_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("thoughts.id", ondelete="CASCADE"), nullable=False, index=True
    )
    to_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("thoughts.id", ondelete="CASCADE"), nullable=False, index=True
    )

    # Relationships
    board = relationship("Board", back_populates="connections")
