class BaseDocumentClient:
    """Base class for a client to a document store keyed by a single primary key.

    Besides put/get/delete by primary key, a document store must support one
    secondary index lookup (all documents whose field equals a value) and an
    additive append to a list field that does not overwrite the whole document,
    so that concurrent appends from different writers all survive.

    This class is intended to be subclassed by specific implementations, such as
    Amazon DynamoDB, a relational table or an in-memory store.
    """
    def __init__(self, **config: dict):
        """Initialize the document client with configuration parameters.

        Args:
            config (dict): Configuration parameters for the document client.
        """
        self.config = config
        self.key = config.get('key', 'id')
        self.connected = False

    def connect(self):
        """Connect to the document store."""
        raise NotImplementedError("Subclasses should implement this method.")

    def disconnect(self):
        """Disconnect from the document store."""
        raise NotImplementedError("Subclasses should implement this method.")

    def get(self, key: str) -> dict | None:
        """Get a document by its primary key, or None if it does not exist."""
        raise NotImplementedError("Subclasses should implement this method.")

    def put(self, document: dict) -> None:
        """Store a whole document, replacing any document with the same primary key."""
        raise NotImplementedError("Subclasses should implement this method.")

    def update(self, key: str, fields: dict) -> dict:
        """Overwrite some fields of an existing document and return the updated document.

        Raises NotFoundError if no document exists under the key.
        """
        raise NotImplementedError("Subclasses should implement this method.")

    def append(self, key: str, field: str, values: list) -> dict:
        """Atomically append values to a list field of an existing document.

        Raises NotFoundError if no document exists under the key.
        """
        raise NotImplementedError("Subclasses should implement this method.")

    def delete(self, key: str) -> None:
        """Delete a document by its primary key."""
        raise NotImplementedError("Subclasses should implement this method.")

    def query(self, field: str, value) -> list[dict]:
        """List all documents whose indexed field equals the value, in no particular order."""
        raise NotImplementedError("Subclasses should implement this method.")
