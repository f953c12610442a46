import logging
from db.content_repository import ContentRepository
from models.content_item import ContentItem
from utils.catalog.window import CatalogWindow, page_size_for_width
from utils.notifications import CONTENT_CREATED, CONTENT_DELETED, NotificationHub

logger = logging.getLogger(__name__)


def order_items(items: list[ContentItem]) -> list[ContentItem]:
    """Newest upload first."""
    return sorted(items, key=lambda item: item.created_at, reverse=True)


class CatalogView:
    """The catalog of one session: visible items, newest first, shown one window at a time.

    A view belongs to a single session and must not be shared. It subscribes to
    content notifications on ``mount()`` and re-derives the whole collection
    (filter, sort, window) when one arrives; ``unmount()`` unsubscribes.
    """

    def __init__(self, repository: ContentRepository, hub: NotificationHub, caller_id: str | None, width: int = 1024):
        self._repository = repository
        self._hub = hub
        self.caller_id = caller_id
        self.window: CatalogWindow[ContentItem] = CatalogWindow(page_size=page_size_for_width(width))
        self._unsubscribers = []

    @property
    def mounted(self) -> bool:
        return bool(self._unsubscribers)

    def mount(self) -> list[ContentItem]:
        """Subscribe to content notifications and load the first window."""
        if not self.mounted:
            self._unsubscribers = [
                self._hub.subscribe(CONTENT_CREATED, self._on_content_changed),
                self._hub.subscribe(CONTENT_DELETED, self._on_content_changed),
            ]
        self.refresh()
        return self.visible()

    def unmount(self) -> None:
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers = []

    def _on_content_changed(self, event: str, payload: dict) -> None:
        logger.info(f"Refreshing catalog of {self.caller_id} after {event}")
        self.refresh()

    def refresh(self) -> int:
        """Reload the visible items from the repository and reclamp the window."""
        return self.window.refresh(order_items(self._repository.list_visible(self.caller_id)))

    def visible(self) -> list[ContentItem]:
        return self.window.visible()

    def advance(self) -> list[ContentItem]:
        self.window.advance()
        return self.visible()

    def retreat(self) -> list[ContentItem]:
        self.window.retreat()
        return self.visible()

    def jump_to_page(self, page: int) -> list[ContentItem]:
        self.window.jump_to_page(page)
        return self.visible()

    def resize(self, width: int) -> list[ContentItem]:
        self.window.resize_to_width(width)
        return self.visible()
