from recallscan.orchestrator.contracts import WorldPosition


class Presenter:
    """Receives the flow's state-entry events. Every hook defaults to a no-op."""

    def on_busy_spinner(self, busy: bool):
        pass

    def on_label_ready(self, title: str, status: str, position: WorldPosition | None):
        """Anchor a two-line label (object name, recall status) at a world point."""
        pass

    def on_prompt_ready(self, text: str):
        pass

    def on_remediation_link(self, url: str):
        pass

    def on_notice(self, text: str):
        """Neutral, non-blocking notice shown when a session fails."""
        pass
