from recallscan.orchestrator.contracts import WorldPosition
from recallscan.orchestrator.presenter import Presenter


class QueuePresenter(Presenter):
    """Queues flow events on the status store for the polling client."""

    def __init__(self, status_store):
        self.status = status_store

    def on_busy_spinner(self, busy: bool):
        self.status.push_event("busy_spinner", busy=busy)

    def on_label_ready(self, title: str, status: str, position: WorldPosition | None):
        pos = None if position is None else {"x": position.x, "y": position.y, "z": position.z}
        self.status.push_event("label_ready", title=title, status=status, position=pos)

    def on_prompt_ready(self, text: str):
        self.status.push_event("prompt_ready", text=text)

    def on_remediation_link(self, url: str):
        self.status.push_event("remediation_link", url=url)

    def on_notice(self, text: str):
        self.status.push_event("notice", text=text)
