from utils.notifications import NotificationHub

class Repository():
    def __init__(self,
                 clients: dict | None = None,
                 hub: NotificationHub | None = None,
                 verbose: bool = False,
                 auto_connect: bool = False
                ):
        """Initialize the repository with its storage clients.

        Args:
            clients (dict): The storage clients the repository reads and writes, by name.
            hub (NotificationHub): The hub notifications are published to, if any.
            verbose (bool): Whether to print verbose output for debugging.
            auto_connect (bool): Whether to connect the clients right away.
        """
        self._clients = clients or {}
        self._hub = hub
        self._verbose = verbose
        if auto_connect:
            self.connect()

    def connect(self) -> None:
        """Connect all storage clients."""
        if self._verbose: print(f"[{type(self).__name__}] connect")
        for client in self._clients.values():
            client.connect()

    def disconnect(self) -> None:
        """Disconnect all storage clients."""
        if self._verbose: print(f"[{type(self).__name__}] disconnect")
        for client in self._clients.values():
            client.disconnect()

    def _notify(self, event: str, payload: dict) -> None:
        """Publish a notification, if a hub was injected."""
        if self._hub is not None:
            self._hub.publish(event, payload)

    def create_session(self) -> 'RepositorySession':
        """Create a session for the repository."""
        return RepositorySession(self)

class RepositorySession():
    def __init__(self, repository: 'Repository'):
        """Initialize the repository session."""
        self._repository = repository

    def __enter__(self):
        """Enter the repository session."""
        self._repository.connect()
        return self._repository

    def __exit__(self, exc_type, exc_value, traceback):
        """Exit the repository session."""
        self._repository.disconnect()
