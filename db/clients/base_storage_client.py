class BaseStorageClient:
    """Base class for a client to a key-addressed object storage system (a blob store).

    Objects are opaque byte payloads addressed by a key. Keys are namespaced by a
    prefix per artifact kind (videos, thumbnails, metadata sidecars).

    This class is intended to be subclassed by specific storage client implementations, such as
    Amazon S3 or an in-memory store.
    """
    def __init__(self, **config: dict):
        """Initialize the storage client with configuration parameters.

        Args:
            config (dict): Configuration parameters for the storage client.
        """
        self.config = config
        self.connected = False

    def connect(self):
        """Connect to the storage system."""
        raise NotImplementedError("Subclasses should implement this method.")

    def disconnect(self):
        """Disconnect from the storage system."""
        raise NotImplementedError("Subclasses should implement this method.")

    def put(self, key: str, body: bytes, content_type: str = 'application/octet-stream') -> None:
        """Store a payload under the given key, replacing any existing object."""
        raise NotImplementedError("Subclasses should implement this method.")

    def get(self, key: str) -> bytes:
        """Get the payload stored under a key. Raises NotFoundError if the key does not exist."""
        raise NotImplementedError("Subclasses should implement this method.")

    def exists(self, key: str) -> bool:
        """Check whether an object is stored under a key."""
        raise NotImplementedError("Subclasses should implement this method.")

    def delete(self, key: str) -> None:
        """Delete the object stored under a key."""
        raise NotImplementedError("Subclasses should implement this method.")

    def list(self, prefix: str = '') -> list[str]:
        """List all keys starting with the given prefix."""
        raise NotImplementedError("Subclasses should implement this method.")

    def total_size(self, prefix: str = '') -> int:
        """Sum of the sizes in bytes of all objects under the given prefix."""
        raise NotImplementedError("Subclasses should implement this method.")

    def signed_url(self, key: str, expires_in: int = 3600) -> str:
        """Issue a time-limited URL giving read access to the object under a key."""
        raise NotImplementedError("Subclasses should implement this method.")
