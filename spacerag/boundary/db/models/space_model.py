"""
Space ORM model.

A space is the tenant-scoped collection that owns documents and conversations.
Deleting a space is the only path that deletes documents.

Dependencies: sqlalchemy, spacerag.boundary.db.base
System role: Tenant scope persistence
"""

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from spacerag.boundary.db.base import Base, TimestampMixin, UUIDMixin


class SpaceModel(Base, UUIDMixin, TimestampMixin):
    """
    Space ORM model.

    Attributes:
        id: UUID primary key
        user_id: Owner identity from the external auth provider
        name: Display name
        description: Optional free text

    Relationships:
        documents: One-to-many with DocumentModel (cascade delete)
        conversations: One-to-many with ConversationModel (cascade delete)
    """

    __tablename__ = "spaces"

    user_id: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    documents = relationship(
        "DocumentModel",
        back_populates="space",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    conversations = relationship(
        "ConversationModel",
        back_populates="space",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        return f"<SpaceModel(id={self.id}, name={self.name})>"
