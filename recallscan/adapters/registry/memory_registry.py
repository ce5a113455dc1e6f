from recallscan.adapters.registry.base import RecallRegistry
from recallscan.orchestrator.errors import RegistryUnavailable


class MemoryRegistry(RecallRegistry):
    """In-process registry. Set `unavailable` to simulate an outage."""
    name = "memory"

    def __init__(self, status_store, entries: list[dict] | None = None):
        super().__init__(status_store)
        self.entries = list(entries or [])
        self.unavailable = False
        self.fetches = 0

    async def fetch_snapshot(self):
        self.fetches += 1
        if self.unavailable:
            self.status.log("memory_registry: simulated outage")
            raise RegistryUnavailable("registry offline")
        return list(self.entries)
