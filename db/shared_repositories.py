from config import config
from db.clients.array_document_client import ArrayDocumentClient
from db.clients.array_storage_client import ArrayStorageClient
from db.clients.dynamo_document_client import DynamoDocumentClient
from db.clients.rds_document_client import RdsDocumentClient
from db.clients.s3_storage_client import S3StorageClient
from db.content_repository import ContentRepository
from db.review_repository import ReviewRepository
from models.review import ReviewORM
from utils.notifications import NotificationHub

def create_blob_client():
    if config.app.storage_backend == 'memory':
        return ArrayStorageClient()
    return S3StorageClient(bucket=config.storage.bucket)

def create_review_client():
    if config.reviews.backend == 'memory':
        return ArrayDocumentClient()
    if config.reviews.backend == 'rds':
        return RdsDocumentClient(base_orm=ReviewORM)
    return DynamoDocumentClient(
        table=config.reviews.table,
        indexes={'content_id': config.reviews.content_index}
    )

# One hub per process; it is handed to every component that publishes or listens
notification_hub = NotificationHub()

content_repository = ContentRepository(
    client=create_blob_client(),
    hub=notification_hub,
    video_prefix=config.storage.video_prefix,
    thumbnail_prefix=config.storage.thumbnail_prefix,
    metadata_prefix=config.storage.metadata_prefix,
    signed_url_expiry=config.storage.signed_url_expiry,
    quota_bytes=config.storage.quota_bytes
)

review_repository = ReviewRepository(
    client=create_review_client(),
    hub=notification_hub
)
