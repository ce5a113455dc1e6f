"""
Recall registry contract.

Adapters only fetch the raw snapshot; matching lives here so every backend
behaves the same:
  - exact, case-sensitive compare of ObjectIdentity.name with productName
  - first match in the order the backend returned wins. There is no
    tie-break for duplicate productName entries, so the winner can change
    if the registry is written to between lookups.
  - no caching: every lookup re-fetches.
"""
from typing import Any, Iterable

from recallscan.orchestrator.contracts import ObjectIdentity, RecallRecord


def iter_children(snapshot: Any) -> Iterable[dict]:
    """Yield object children of a registry node, object or array shaped."""
    if isinstance(snapshot, dict):
        children = snapshot.values()
    elif isinstance(snapshot, list):
        children = snapshot
    else:
        children = ()
    for child in children:
        if isinstance(child, dict):
            yield child


class RecallRegistry:
    name = "base"

    def __init__(self, status_store):
        self.status = status_store

    async def fetch_snapshot(self) -> Any:
        """Return the raw recalls node. Raise RegistryUnavailable on failure."""
        raise NotImplementedError

    async def lookup(self, identity: ObjectIdentity) -> RecallRecord | None:
        snapshot = await self.fetch_snapshot()
        for entry in iter_children(snapshot):
            if entry.get("productName") == identity.name:
                record = RecallRecord.from_registry(entry)
                self.status.log(f"{self.name}_registry: match for '{identity.name}'")
                return record
        self.status.log(f"{self.name}_registry: no recall for '{identity.name}'")
        return None

    async def aclose(self):
        pass
