"""Local JSON file registry, same shape as the Firebase node. Re-read on every lookup."""
import asyncio
import json
from pathlib import Path

from recallscan.adapters.registry.base import RecallRegistry
from recallscan.orchestrator.errors import RegistryUnavailable


class JsonFileRegistry(RecallRegistry):
    name = "json"

    def __init__(self, status_store, path: str | Path):
        super().__init__(status_store)
        self.path = Path(path)

    async def fetch_snapshot(self):
        try:
            text = await asyncio.to_thread(self.path.read_text, encoding="utf-8")
            return json.loads(text)
        except (OSError, ValueError) as e:
            self.status.log(f"json_registry: cannot read {self.path}: {e}")
            raise RegistryUnavailable(f"cannot read {self.path.name}: {e}") from e
