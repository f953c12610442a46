import threading
import time
from db.clients.base_storage_client import BaseStorageClient
from errors import NotFoundError

class ArrayStorageClient(BaseStorageClient):
    """An in-memory blob store that keeps objects in a dictionary keyed by object key."""
    def __init__(self, **config: dict):
        """Initialize the in-memory storage client with configuration parameters.

        Args:
            base_url (str): The base of the fake signed URLs handed out.
        """
        super().__init__(**config)
        self.base_url = config.get('base_url', 'memory://blobs')
        self.storage = {}
        self._lock = threading.Lock()

    def connect(self):
        """Connect to the in-memory storage."""
        # No actual connection needed for in-memory storage
        self.connected = True
        return True

    def disconnect(self):
        """Disconnect from the in-memory storage."""
        # No actual disconnection needed for in-memory storage
        self.connected = False
        return True

    def put(self, key, body, content_type='application/octet-stream'):
        """Store a payload under the given key."""
        if isinstance(body, str):
            body = body.encode('utf-8')
        with self._lock:
            self.storage[key] = {'body': bytes(body), 'content_type': content_type}

    def get(self, key):
        """Retrieve a payload by its key."""
        with self._lock:
            item = self.storage.get(key)
        if item is None:
            raise NotFoundError(f"No object stored under {key}")
        return item['body']

    def exists(self, key):
        with self._lock:
            return key in self.storage

    def delete(self, key):
        """Delete a payload by its key. Deleting a missing key is a no-op, as on S3."""
        with self._lock:
            self.storage.pop(key, None)

    def list(self, prefix=''):
        """List all keys under a prefix, in key order."""
        with self._lock:
            return sorted(key for key in self.storage if key.startswith(prefix))

    def total_size(self, prefix=''):
        with self._lock:
            return sum(len(item['body']) for key, item in self.storage.items() if key.startswith(prefix))

    def signed_url(self, key, expires_in=3600):
        """Hand out a fake signed URL carrying its expiry time, like an S3 pre-signed URL."""
        expires = int(time.time()) + expires_in
        return f"{self.base_url}/{key}?Expires={expires}&Signature=memory"
