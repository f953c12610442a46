import copy
import threading
from db.clients.base_document_client import BaseDocumentClient
from errors import NotFoundError

class ArrayDocumentClient(BaseDocumentClient):
    """An in-memory document store. A single lock makes every operation atomic."""
    def __init__(self, **config: dict):
        super().__init__(**config)
        self.storage = {}
        self._lock = threading.Lock()

    def connect(self):
        # No actual connection needed for in-memory storage
        self.connected = True
        return True

    def disconnect(self):
        self.connected = False
        return True

    def get(self, key):
        with self._lock:
            document = self.storage.get(key)
            return copy.deepcopy(document) if document is not None else None

    def put(self, document):
        with self._lock:
            self.storage[document[self.key]] = copy.deepcopy(document)

    def update(self, key, fields):
        with self._lock:
            if key not in self.storage:
                raise NotFoundError(f"No document stored under {key}")
            self.storage[key].update(copy.deepcopy(fields))
            return copy.deepcopy(self.storage[key])

    def append(self, key, field, values):
        with self._lock:
            if key not in self.storage:
                raise NotFoundError(f"No document stored under {key}")
            document = self.storage[key]
            document[field] = (document.get(field) or []) + copy.deepcopy(list(values))
            return copy.deepcopy(document)

    def delete(self, key):
        with self._lock:
            self.storage.pop(key, None)

    def query(self, field, value):
        with self._lock:
            return [copy.deepcopy(doc) for doc in self.storage.values() if doc.get(field) == value]
