from datetime import datetime, timezone
from enum import Enum
from pydantic import BaseModel, Field, field_validator

# Fields minted at read time; they are never written to the metadata sidecar
TRANSIENT_FIELDS = {'video_url', 'thumbnail_url'}


class Visibility(str, Enum):
    """Who can see a content item in the catalog."""
    PUBLIC = "public"
    PRIVATE = "private"


class ContentDraft(BaseModel):
    """Metadata supplied by the uploader, before any blob is written."""
    title: str = Field(min_length=1)
    description: str = ''
    category: str = ''
    duration_label: str = ''
    visibility: Visibility = Visibility.PUBLIC

    @field_validator('title')
    @classmethod
    def title_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError('title must not be blank')
        return value

    @field_validator('category')
    @classmethod
    def lower_case_category(cls, value: str) -> str:
        return value.strip().lower()


class ContentItem(BaseModel):
    """A published video: the metadata sidecar plus, once hydrated, fresh signed URLs.

    The sidecar is the record of intent and the video blob the record of
    completion; a sidecar may outlive its blobs.
    """
    id: str
    owner_id: str
    title: str
    description: str = ''
    category: str = ''
    duration_label: str = ''
    visibility: Visibility = Visibility.PUBLIC
    blob_key: str
    thumbnail_key: str | None = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    video_url: str | None = None
    thumbnail_url: str | None = None

    @property
    def is_public(self) -> bool:
        return self.visibility == Visibility.PUBLIC

    def visible_to(self, caller_id: str | None) -> bool:
        """Public items are visible to everyone, private ones only to their owner."""
        return self.is_public or (caller_id is not None and self.owner_id == caller_id)

    def to_sidecar(self) -> str:
        """Serialize the persistent part of the item as the JSON sidecar document."""
        return self.model_dump_json(exclude=TRANSIENT_FIELDS)
