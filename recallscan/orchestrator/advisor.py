from recallscan.adapters.inference.base import InferenceClient, InferenceError
from recallscan.orchestrator.contracts import DisambiguationPrompt, ObjectIdentity, RecallRecord, Verdict
from recallscan.orchestrator.errors import AdvisorBackendError
from recallscan.orchestrator.prompts import adjudication_instruction, disambiguation_instruction


class VerdictClassifier:
    def classify(self, text: str) -> Verdict:
        """Map a model reply to CONFIRMED / DENIED, or PENDING when it can't tell."""
        raise NotImplementedError


class SubstringVerdictClassifier(VerdictClassifier):
    """
    Loose token match on the upper-cased reply: any "YES" wins, then any "NO".
    "NO" also hits words like "NOT" or "KNOW", so a reply such as
    "I do not know" reads as DENIED. A stricter structured-output classifier
    can be swapped in through DisambiguationAdvisor(classifier=...).
    """

    def classify(self, text: str) -> Verdict:
        upper = (text or "").upper()
        if "YES" in upper:
            return Verdict.CONFIRMED
        if "NO" in upper:
            return Verdict.DENIED
        return Verdict.PENDING


class DisambiguationAdvisor:
    def __init__(self, client: InferenceClient, status_store,
                 classifier: VerdictClassifier | None = None):
        self.client = client
        self.status = status_store
        self.classifier = classifier or SubstringVerdictClassifier()

    async def _ask(self, instruction: str) -> str:
        try:
            return await self.client.generate(instruction)
        except InferenceError as e:
            raise AdvisorBackendError(e.message, detail=e.body) from e

    async def build_prompt(self, record: RecallRecord, identity: ObjectIdentity) -> DisambiguationPrompt:
        text = (await self._ask(disambiguation_instruction(record, identity))).strip()
        if not text:
            raise AdvisorBackendError("model returned an empty prompt")
        self.status.log(f"advisor: prompt='{text[:120]}'")
        return DisambiguationPrompt(text=text)

    async def adjudicate(self, record: RecallRecord, identity: ObjectIdentity, user_answer: str,
                         prompt: DisambiguationPrompt | None = None) -> Verdict:
        """Returns PENDING when the reply holds neither YES nor NO."""
        raw = await self._ask(adjudication_instruction(record, identity, user_answer, prompt))
        verdict = self.classifier.classify(raw)
        self.status.log(f"advisor: adjudication raw='{raw[:120]}' → {verdict.value}")
        return verdict
