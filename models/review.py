from typing import List
from pydantic import BaseModel, Field, field_validator
from sqlalchemy import JSON, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column
from .base import Base

MIN_RATING = 1
MAX_RATING = 5


class ReviewORM(Base):
    __tablename__ = 'reviews'

    id: Mapped[str] = mapped_column(String(255), primary_key=True)
    content_id: Mapped[str] = mapped_column(String(255), nullable=False)
    author_id: Mapped[str] = mapped_column(String(255), nullable=False)
    author_email: Mapped[str] = mapped_column(String(255), nullable=True)
    rating: Mapped[int] = mapped_column(Integer, nullable=False)
    comment: Mapped[str] = mapped_column(Text, nullable=False, default='')
    created_at: Mapped[str] = mapped_column(String(64), nullable=False)
    updated_at: Mapped[str] = mapped_column(String(64), nullable=False)
    replies: Mapped[list] = mapped_column(JSON, nullable=False, default=list)

    __table_args__ = (
        Index('ix_reviews_content_id', 'content_id'),
    )

    def __repr__(self):
        return f"<Review(id={self.id}, content_id={self.content_id}, rating={self.rating})>"


class Reply(BaseModel):
    """A reply to a review. Replies are append-only and live inside their review."""
    id: str
    author_id: str
    author_email: str = ''
    content: str
    created_at: str


class Review(BaseModel):
    id: str
    content_id: str
    author_id: str
    author_email: str = ''
    rating: int
    comment: str = ''
    created_at: str
    updated_at: str
    replies: List[Reply] = Field(default_factory=list)

    @field_validator('replies', mode='before')
    @classmethod
    def replies_never_null(cls, value):
        return value or []


class ReviewInput(BaseModel):
    """Review fields as submitted by a user, validated at the API boundary."""
    rating: int = Field(ge=MIN_RATING, le=MAX_RATING)
    comment: str = ''


class ReplyInput(BaseModel):
    content: str = Field(min_length=1)


class RatingSummary(BaseModel):
    """Average rating and review count, derived from the reviews on every read."""
    average: float = 0.0
    count: int = 0
