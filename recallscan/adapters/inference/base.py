from recallscan.orchestrator.contracts import Frame


class InferenceError(Exception):
    """Backend call failed: transport error, non-2xx status or unusable payload."""

    def __init__(self, message: str, status_code: int | None = None, body: str | None = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.body = body


class InferenceClient:
    name = "base"

    async def generate(self, instruction: str, image: Frame | None = None) -> str:
        """Send instruction (+ optional image) and return the reply text."""
        raise NotImplementedError

    async def aclose(self):
        pass
