from dataclasses import dataclass, field
from typing import Any, Dict, List

MAX_LOGS = 200
MAX_EVENTS = 100


@dataclass
class StatusStore:
    logs: List[str] = field(default_factory=list)
    # presentation events waiting for the client; GET /status reads and clears them
    events: List[Dict[str, Any]] = field(default_factory=list)

    def log(self, msg: str):
        self.logs.append(msg)
        if len(self.logs) > MAX_LOGS:
            self.logs = self.logs[-MAX_LOGS:]

    def push_event(self, kind: str, **data):
        self.events.append({"kind": kind, **data})
        if len(self.events) > MAX_EVENTS:
            for dropped in self.events[:-MAX_EVENTS]:
                self.log(f"status: event queue full, dropped {dropped['kind']} {dropped}")
            self.events = self.events[-MAX_EVENTS:]

    def drain_events(self) -> List[Dict[str, Any]]:
        events, self.events = self.events, []
        return events
