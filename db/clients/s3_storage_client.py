import logging
import boto3
from botocore.exceptions import BotoCoreError, ClientError
from db.clients.base_storage_client import BaseStorageClient
from errors import NotFoundError, StoreUnavailableError

from config import config

logger = logging.getLogger(__name__)

# Error codes S3 answers with when a key (or the whole bucket) is missing
MISSING_KEY_CODES = ('NoSuchKey', '404', 'NotFound')

def is_missing_key(error: ClientError) -> bool:
    """Check whether a botocore ClientError means the requested key does not exist."""
    return error.response.get('Error', {}).get('Code') in MISSING_KEY_CODES

class S3StorageClient(BaseStorageClient):
    """A client for Amazon S3 storage."""
    def __init__(self, **config: dict):
        """Initialize the S3 storage client with configuration parameters.

        Args:
            bucket (str): The name of the S3 bucket to use.
            client (any): An already built boto3 S3 client (used for testing).
        """
        super().__init__(**config)
        self.bucket = config.get('bucket')
        if not self.bucket:
            raise ValueError("Bucket name must be provided in the configuration.")
        self._injected_client = config.get('client')
        self.s3 = None

    def connect(self):
        """Connect to the S3 service."""
        if self._injected_client is not None:
            self.s3 = self._injected_client
            self.connected = True
            return
        session = boto3.Session(
            aws_access_key_id=config.aws.access_key_id or None,
            aws_secret_access_key=config.aws.secret_access_key or None,
            region_name=config.aws.region
        )
        self.s3 = session.client('s3')
        self.connected = True

    def disconnect(self):
        """Disconnect from the S3 service."""
        self.s3 = None
        self.connected = False

    def _ensure_connected(self):
        if not self.connected:
            self.connect()

    def put(self, key, body, content_type='application/octet-stream'):
        """Store an object in the S3 bucket."""
        self._ensure_connected()
        try:
            self.s3.put_object(Bucket=self.bucket, Key=key, Body=body, ContentType=content_type)
        except (ClientError, BotoCoreError) as e:
            raise StoreUnavailableError(f"Failed to write {key}: {e}") from e

    def get(self, key):
        """Retrieve an object from the S3 bucket."""
        self._ensure_connected()
        try:
            response = self.s3.get_object(Bucket=self.bucket, Key=key)
            return response['Body'].read()
        except ClientError as e:
            if is_missing_key(e):
                raise NotFoundError(f"No object stored under {key}") from e
            raise StoreUnavailableError(f"Failed to read {key}: {e}") from e
        except BotoCoreError as e:
            raise StoreUnavailableError(f"Failed to read {key}: {e}") from e

    def exists(self, key):
        """Check whether an object exists in the S3 bucket."""
        self._ensure_connected()
        try:
            self.s3.head_object(Bucket=self.bucket, Key=key)
            return True
        except ClientError as e:
            if is_missing_key(e):
                return False
            raise StoreUnavailableError(f"Failed to stat {key}: {e}") from e
        except BotoCoreError as e:
            raise StoreUnavailableError(f"Failed to stat {key}: {e}") from e

    def delete(self, key):
        """Delete an object from the S3 bucket."""
        self._ensure_connected()
        try:
            self.s3.delete_object(Bucket=self.bucket, Key=key)
        except (ClientError, BotoCoreError) as e:
            raise StoreUnavailableError(f"Failed to delete {key}: {e}") from e

    def _iter_objects(self, prefix):
        # list_objects_v2 returns at most 1000 keys per call
        paginator = self.s3.get_paginator('list_objects_v2')
        try:
            for page in paginator.paginate(Bucket=self.bucket, Prefix=prefix):
                for obj in page.get('Contents', []):
                    yield obj
        except ClientError as e:
            if e.response.get('Error', {}).get('Code') == 'NoSuchBucket':
                logger.warning(f"Bucket {self.bucket} does not exist, listing nothing")
                return
            raise StoreUnavailableError(f"Failed to list {prefix}: {e}") from e
        except BotoCoreError as e:
            raise StoreUnavailableError(f"Failed to list {prefix}: {e}") from e

    def list(self, prefix=''):
        """List all keys under a prefix in the S3 bucket."""
        self._ensure_connected()
        return [obj['Key'] for obj in self._iter_objects(prefix)]

    def total_size(self, prefix=''):
        """Sum the sizes of all objects under a prefix in the S3 bucket."""
        self._ensure_connected()
        return sum(obj.get('Size', 0) for obj in self._iter_objects(prefix))

    def signed_url(self, key, expires_in=3600):
        """Generate a pre-signed GetObject URL for a key."""
        self._ensure_connected()
        try:
            return self.s3.generate_presigned_url(
                ClientMethod='get_object',
                Params={'Bucket': self.bucket, 'Key': key},
                ExpiresIn=expires_in,
            )
        except (ClientError, BotoCoreError) as e:
            raise StoreUnavailableError(f"Failed to sign {key}: {e}") from e
