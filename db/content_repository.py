"""Content repository: a blob store used as a two-table pseudo-database.

* the blob table holds video and thumbnail payloads under opaque keys
  (``videos/<uuid>-<filename>``, ``thumbnails/<uuid>-<filename>``);
* the metadata table holds one JSON sidecar per content item under
  ``metadata/<content id>.json``.

There is no transaction spanning the two. The sidecar is written only after the
video blob, and deleted only after the blobs, so the only inconsistent states
are an orphaned blob (left alone) or a sidecar whose blobs are gone (treated as
an unavailable item when listing).
"""

import logging
from uuid import uuid4
from pydantic import ValidationError
from db.clients.base_storage_client import BaseStorageClient
from db.repository import Repository
from errors import NotFoundError, PartialFailureError, StoreUnavailableError, UnauthorizedError
from models.content_item import ContentDraft, ContentItem
from models.storage import StorageUsage
from utils.clock import monotonic_now
from utils.notifications import CONTENT_CREATED, CONTENT_DELETED, NotificationHub, STORAGE_CHANGED

logger = logging.getLogger(__name__)

SIDECAR_EXTENSION = '.json'

def blob_name(filename: str) -> str:
    """Build a collision free object name that keeps the uploaded file name readable."""
    return f"{uuid4()}-{filename or 'upload'}"

class ContentRepository(Repository):
    def __init__(self,
                 client: BaseStorageClient,
                 hub: NotificationHub | None = None,
                 video_prefix: str = 'videos',
                 thumbnail_prefix: str = 'thumbnails',
                 metadata_prefix: str = 'metadata',
                 signed_url_expiry: int = 3600,
                 quota_bytes: int = 5 * 1024 * 1024 * 1024,
                 **kwargs
                ):
        """Initialize the content repository.

        Args:
            client (BaseStorageClient): The blob store holding blobs and sidecars.
            hub (NotificationHub): Receives content.created, content.deleted and storage.changed.
            video_prefix (str): Namespace of the video blobs.
            thumbnail_prefix (str): Namespace of the thumbnail blobs.
            metadata_prefix (str): Namespace of the metadata sidecars.
            signed_url_expiry (int): Validity of every signed URL, in seconds.
            quota_bytes (int): Storage quota shared by all uploads.
        """
        super().__init__(clients={'blobs': client}, hub=hub, **kwargs)
        self._blobs = client
        self.video_prefix = video_prefix.rstrip('/')
        self.thumbnail_prefix = thumbnail_prefix.rstrip('/')
        self.metadata_prefix = metadata_prefix.rstrip('/')
        self.signed_url_expiry = signed_url_expiry
        self.quota_bytes = quota_bytes

    def metadata_key(self, content_id: str) -> str:
        return f"{self.metadata_prefix}/{content_id}{SIDECAR_EXTENSION}"

    def content_id_from_key(self, key: str) -> str | None:
        """Extract the content id from a sidecar key, or None if the key is not a sidecar."""
        prefix = f"{self.metadata_prefix}/"
        if not key.startswith(prefix) or not key.endswith(SIDECAR_EXTENSION):
            return None
        name = key[len(prefix):-len(SIDECAR_EXTENSION)]
        # Nested keys are not sidecars
        if not name or '/' in name:
            return None
        return name

    # Metadata table

    def _read_metadata(self, content_id: str) -> ContentItem:
        """Read and parse a sidecar, always from the store. Raises NotFoundError if absent."""
        body = self._blobs.get(self.metadata_key(content_id))
        return ContentItem.model_validate_json(body)

    def _write_metadata(self, item: ContentItem) -> None:
        self._blobs.put(self.metadata_key(item.id), item.to_sidecar().encode('utf-8'), 'application/json')

    def _hydrate(self, item: ContentItem) -> ContentItem:
        """Attach freshly minted signed URLs. URLs are derived from the keys on every read."""
        thumbnail_url = None
        if item.thumbnail_key:
            thumbnail_url = self._blobs.signed_url(item.thumbnail_key, self.signed_url_expiry)
        return item.model_copy(update={
            'video_url': self._blobs.signed_url(item.blob_key, self.signed_url_expiry),
            'thumbnail_url': thumbnail_url,
        })

    # Operations

    def upload_content(self, owner_id: str, body: bytes, filename: str, content_type: str, draft: ContentDraft) -> ContentItem:
        """Store a video blob, then the sidecar describing it.

        If the blob write fails nothing else is written. If the sidecar write
        fails the blob stays behind as an orphan and the error propagates.
        """
        blob_key = f"{self.video_prefix}/{blob_name(filename)}"
        self._blobs.put(blob_key, body, content_type)
        logger.info(f"Stored video blob {blob_key} ({len(body)} bytes) for {owner_id}")

        item = ContentItem(
            id=str(uuid4()),
            owner_id=owner_id,
            blob_key=blob_key,
            created_at=monotonic_now(),
            **draft.model_dump(),
        )
        self._write_metadata(item)
        logger.info(f"Stored metadata for content {item.id}")

        self._notify(CONTENT_CREATED, {'content_id': item.id, 'owner_id': owner_id})
        self._notify(STORAGE_CHANGED, {'content_id': item.id})
        return self._hydrate(item)

    def attach_thumbnail(self, content_id: str, body: bytes, filename: str, content_type: str) -> ContentItem:
        """Store a thumbnail blob and record its key in the item's sidecar.

        The sidecar is re-read right before the merge so that concurrent
        metadata writes are not clobbered by a stale copy. If the sidecar is
        gone the thumbnail stays behind as an orphan and NotFoundError is raised.
        """
        thumbnail_key = f"{self.thumbnail_prefix}/{blob_name(filename)}"
        self._blobs.put(thumbnail_key, body, content_type)
        logger.info(f"Stored thumbnail blob {thumbnail_key} for content {content_id}")

        try:
            item = self._read_metadata(content_id)
        except NotFoundError:
            logger.warning(f"Content {content_id} disappeared before its thumbnail was attached, {thumbnail_key} is orphaned")
            raise NotFoundError(f"Content {content_id} not found")
        item = item.model_copy(update={'thumbnail_key': thumbnail_key})
        self._write_metadata(item)

        self._notify(STORAGE_CHANGED, {'content_id': content_id})
        return self._hydrate(item)

    def upload_with_thumbnail(self, owner_id: str, video: dict, draft: ContentDraft, thumbnail: dict | None = None) -> ContentItem:
        """Upload a video and, optionally, its thumbnail as one user action.

        ``video`` and ``thumbnail`` are dicts with ``body``, ``filename`` and
        ``content_type``. A thumbnail failure leaves the video published and is
        raised as a PartialFailureError carrying the created item.
        """
        item = self.upload_content(owner_id, video['body'], video['filename'], video['content_type'], draft)
        if thumbnail is None:
            return item
        try:
            return self.attach_thumbnail(item.id, thumbnail['body'], thumbnail['filename'], thumbnail['content_type'])
        except Exception as e:
            raise PartialFailureError(
                f"Video uploaded but the thumbnail failed: {e}",
                completed=['video', 'metadata'],
                result=item,
            ) from e

    def get_content(self, content_id: str) -> ContentItem:
        """Read one content item with fresh signed URLs."""
        try:
            item = self._read_metadata(content_id)
        except NotFoundError:
            raise NotFoundError(f"Content {content_id} not found")
        return self._hydrate(item)

    def list_visible(self, caller_id: str | None) -> list[ContentItem]:
        """List every item that is public or owned by the caller, in no particular order.

        One unreadable item (malformed sidecar, missing blob, vanished sidecar,
        store failure on its own reads)
        is logged and skipped; it never fails the whole listing.
        """
        items = []
        for key in self._blobs.list(f"{self.metadata_prefix}/"):
            content_id = self.content_id_from_key(key)
            if content_id is None:
                continue
            try:
                item = self._read_metadata(content_id)
                if not item.visible_to(caller_id):
                    continue
                if not self._blobs.exists(item.blob_key):
                    raise NotFoundError(f"Video blob {item.blob_key} is missing")
                items.append(self._hydrate(item))
            except (NotFoundError, StoreUnavailableError, ValidationError, ValueError) as e:
                logger.warning(f"Skipping unavailable content {content_id}: {e}")
        return items

    def delete_content(self, content_id: str, caller_id: str) -> None:
        """Delete the video blob, the thumbnail blob (if any) and then the sidecar.

        Only the owner may delete. A failure after the first deletion is
        reported as a PartialFailureError; nothing is rolled back.
        """
        try:
            item = self._read_metadata(content_id)
        except NotFoundError:
            raise NotFoundError(f"Content {content_id} not found")
        if item.owner_id != caller_id:
            raise UnauthorizedError("Only the owner can delete this video")

        steps = [('video', item.blob_key)]
        if item.thumbnail_key:
            steps.append(('thumbnail', item.thumbnail_key))
        steps.append(('metadata', self.metadata_key(content_id)))

        completed = []
        for step, key in steps:
            try:
                self._blobs.delete(key)
            except Exception as e:
                if not completed:
                    raise
                logger.warning(f"Delete of content {content_id} stopped after {completed}: {e}")
                raise PartialFailureError(
                    f"Content {content_id} was only partially deleted ({', '.join(completed)})",
                    completed=completed,
                ) from e
            completed.append(step)
        logger.info(f"Deleted content {content_id}")

        self._notify(CONTENT_DELETED, {'content_id': content_id})
        self._notify(STORAGE_CHANGED, {'content_id': content_id})

    def storage_usage(self) -> StorageUsage:
        """Bytes used by video and thumbnail blobs against the quota."""
        used = self._blobs.total_size(f"{self.video_prefix}/") + self._blobs.total_size(f"{self.thumbnail_prefix}/")
        return StorageUsage(used=used, total=self.quota_bytes)

    def check_storage_limit(self, size: int) -> bool:
        """Check whether a new upload of ``size`` bytes fits in the remaining quota."""
        return size <= self.storage_usage().available
