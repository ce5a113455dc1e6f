"""
Tests for the StatusStore log ring and event queue.
"""
from recallscan.services.status_store import MAX_EVENTS, MAX_LOGS, StatusStore


class TestEventQueue:
    def test_drain_clears(self):
        store = StatusStore()
        store.push_event("notice", text="hi")
        assert store.drain_events() == [{"kind": "notice", "text": "hi"}]
        assert store.drain_events() == []

    def test_overflow_drops_oldest_and_logs_it(self):
        store = StatusStore()
        store.push_event("label_ready", title="Acme Blender", status="Recalled!")
        for _ in range(MAX_EVENTS):
            store.push_event("busy_spinner", busy=True)

        events = store.drain_events()
        assert len(events) == MAX_EVENTS
        assert all(e["kind"] == "busy_spinner" for e in events)
        dropped = [line for line in store.logs if "dropped" in line]
        assert len(dropped) == 1
        assert "label_ready" in dropped[0]
        assert "Acme Blender" in dropped[0]


class TestLogRing:
    def test_keeps_newest(self):
        store = StatusStore()
        for i in range(MAX_LOGS + 5):
            store.log(f"line {i}")
        assert len(store.logs) == MAX_LOGS
        assert store.logs[-1] == f"line {MAX_LOGS + 4}"
        assert store.logs[0] == "line 5"
