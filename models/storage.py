from pydantic import BaseModel, computed_field


class StorageUsage(BaseModel):
    """Bytes used by uploaded blobs against the configured quota."""
    used: int
    total: int

    @computed_field
    @property
    def available(self) -> int:
        return max(self.total - self.used, 0)

    @computed_field
    @property
    def percentage(self) -> float:
        if self.total <= 0:
            return 100.0
        return self.used / self.total * 100
