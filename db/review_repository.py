import logging
from db.clients.base_document_client import BaseDocumentClient
from db.repository import Repository
from errors import NotFoundError, UnauthorizedError
from models.review import RatingSummary, Reply, Review
from utils.clock import monotonic_timestamp
from utils.rating import summarize

logger = logging.getLogger(__name__)

# Separates the parent id from the timestamp in composite ids
ID_SEPARATOR = '#'

def composite_id(parent_id: str, timestamp: str) -> str:
    return f"{parent_id}{ID_SEPARATOR}{timestamp}"

class ReviewRepository(Repository):
    """Reviews and their replies, one document per review, indexed by content id.

    Updates and deletes re-read the review right before checking ownership.
    There is no version token: two concurrent edits by the author are last
    write wins. Replies are appended with the store's additive primitive so
    concurrent replies are never lost.
    """
    def __init__(self, client: BaseDocumentClient, **kwargs):
        super().__init__(clients={'reviews': client}, **kwargs)
        self._documents = client

    def _fetch(self, review_id: str) -> Review:
        document = self._documents.get(review_id)
        if document is None:
            raise NotFoundError(f"Review {review_id} not found")
        return Review.model_validate(document)

    def _fetch_owned(self, review_id: str, actor_id: str, action: str) -> Review:
        review = self._fetch(review_id)
        if review.author_id != actor_id:
            raise UnauthorizedError(f"Unauthorized to {action} this review")
        return review

    def create_review(self, content_id: str, author_id: str, author_email: str, rating: int, comment: str = '') -> Review:
        """Create a review. The rating is expected to be validated by the caller."""
        timestamp = monotonic_timestamp()
        review = Review(
            id=composite_id(content_id, timestamp),
            content_id=content_id,
            author_id=author_id,
            author_email=author_email,
            rating=rating,
            comment=comment,
            created_at=timestamp,
            updated_at=timestamp,
            replies=[],
        )
        self._documents.put(review.model_dump())
        logger.info(f"Created review {review.id} by {author_id}")
        return review

    def get_review(self, review_id: str) -> Review:
        return self._fetch(review_id)

    def list_for_content(self, content_id: str) -> list[Review]:
        """All reviews of a content item, in no particular order."""
        return [Review.model_validate(document) for document in self._documents.query('content_id', content_id)]

    def update_review(self, review_id: str, actor_id: str, comment: str, rating: int) -> Review:
        self._fetch_owned(review_id, actor_id, 'edit')
        document = self._documents.update(review_id, {
            'comment': comment,
            'rating': rating,
            'updated_at': monotonic_timestamp(),
        })
        logger.info(f"Updated review {review_id}")
        return Review.model_validate(document)

    def delete_review(self, review_id: str, actor_id: str) -> None:
        self._fetch_owned(review_id, actor_id, 'delete')
        self._documents.delete(review_id)
        logger.info(f"Deleted review {review_id}")

    def add_reply(self, review_id: str, author_id: str, author_email: str, content: str) -> Review:
        """Append a reply to a review. Anyone may reply; replies cannot be edited or deleted."""
        timestamp = monotonic_timestamp()
        reply = Reply(
            id=composite_id(review_id, timestamp),
            author_id=author_id,
            author_email=author_email,
            content=content,
            created_at=timestamp,
        )
        try:
            document = self._documents.append(review_id, 'replies', [reply.model_dump()])
        except NotFoundError:
            raise NotFoundError(f"Review {review_id} not found")
        logger.info(f"Added reply {reply.id}")
        return Review.model_validate(document)

    def average_rating(self, content_id: str) -> RatingSummary:
        """Average rating and count over every review of a content item, recomputed on each call."""
        return summarize(self.list_for_content(content_id))
