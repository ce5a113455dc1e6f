"""
VerificationFlow: one tap → identify → recall lookup → (ask → adjudicate).

  IDLE ─select→ CAPTURING → IDENTIFYING → LOOKING_UP ─no match→ NOT_RECALLED
                                                      └─match→ AWAITING_DISAMBIGUATION
                                 ─answer→ ADJUDICATING → CONFIRMED | DENIED
  any non-idle phase ─error→ FAILED

Terminal phases emit their events and drop straight back to IDLE.
Only one session exists at a time; selections while busy are ignored.
All mutation happens on the event loop, so the flow needs no locks: every
await is followed by a currency check and results for a session that was
cancelled or replaced are dropped.
"""
import asyncio
import time

from recallscan.orchestrator import errors
from recallscan.orchestrator.contracts import (
    Phase, SelectionPoint, Session, SessionOutcome, Verdict,
)
from recallscan.orchestrator.errors import AnswerTimeout, RecallScanError
from recallscan.orchestrator.presenter import Presenter
from recallscan.orchestrator.prompts import LABEL_NOT_RECALLED, LABEL_RECALLED, NOTICE_FAILED


class VerificationFlow:
    def __init__(self, image_source, identifier, registry, advisor, status_store,
                 presenter: Presenter | None = None, answer_timeout: float | None = None):
        self.image_source = image_source
        self.identifier = identifier
        self.registry = registry
        self.advisor = advisor
        self.status = status_store
        self.presenter = presenter or Presenter()
        self.answer_timeout = answer_timeout

        self._session: Session | None = None
        self._task: asyncio.Task | None = None
        self._timeout_handle: asyncio.TimerHandle | None = None
        self._t0 = 0.0
        self.last_outcome: SessionOutcome | None = None

    @property
    def session(self) -> Session | None:
        return self._session

    @property
    def phase(self) -> Phase:
        return self._session.phase if self._session is not None else Phase.IDLE

    @property
    def busy(self) -> bool:
        return self._session is not None

    # ── inbound events ──────────────────────────────────────────────────────

    def select(self, point: SelectionPoint) -> bool:
        """Start a session for a tap. Returns False (and changes nothing) when busy.
        Must be called from inside the running event loop."""
        if self._session is not None:
            self.status.log(f"flow: selection ignored, busy ({self.phase.value})")
            return False

        session = Session(phase=Phase.CAPTURING, selection=point)
        self._session = session
        self._t0 = time.time()
        self.status.log(f"flow: select ({point.x:.2f}, {point.y:.2f})")
        self.presenter.on_busy_spinner(True)

        try:
            frame, position = self.image_source.capture(point)
        except Exception as e:
            self._fail(session, e)
            return True

        session.anchor_position = position
        self._enter(session, Phase.IDENTIFYING)
        self._task = asyncio.get_running_loop().create_task(self._identify_and_lookup(session, frame))
        return True

    def submit_answer(self, text: str) -> bool:
        session = self._session
        if session is None or session.phase is not Phase.AWAITING_DISAMBIGUATION or session.prompt is None:
            self.status.log(f"flow: answer rejected in phase {self.phase.value}")
            return False

        self._cancel_timeout()
        session.user_answer = text
        self._enter(session, Phase.ADJUDICATING)
        self.presenter.on_busy_spinner(True)
        self._task = asyncio.get_running_loop().create_task(self._adjudicate(session))
        return True

    def cancel(self, reason: str = "cancelled") -> bool:
        """Abandon the active session. In-flight calls are cancelled and their results dropped."""
        session = self._session
        if session is None:
            return False

        self.status.log(f"flow: cancel in {session.phase.value} ({reason})")
        task, self._task = self._task, None
        if task is not None and not task.done():
            task.cancel()
        self._cancel_timeout()
        self._session = None
        self.last_outcome = SessionOutcome(
            ok=False, phase=Phase.IDLE, duration_ms=self._elapsed_ms(),
            error_code=errors.ERR_CANCELLED, identity=session.object_identity,
            record=session.recall_record,
        )
        self.presenter.on_busy_spinner(False)
        return True

    async def settle(self):
        """Wait until no backend call is in flight (idle, or waiting for the user)."""
        while True:
            task = self._task
            if task is None or task.done():
                return
            await asyncio.wait({task})

    # ── session steps ───────────────────────────────────────────────────────

    async def _identify_and_lookup(self, session: Session, frame):
        try:
            identity = await self.identifier.identify(frame)
            if not self._is_current(session):
                return
            session.object_identity = identity
            self._enter(session, Phase.LOOKING_UP)

            record = await self.registry.lookup(identity)
            if not self._is_current(session):
                return
            if record is None:
                self._conclude(session, Phase.NOT_RECALLED)
                return

            session.recall_record = record
            self._enter(session, Phase.AWAITING_DISAMBIGUATION)
            prompt = await self.advisor.build_prompt(record, identity)
            if not self._is_current(session):
                return
            session.prompt = prompt
            self.presenter.on_prompt_ready(prompt.text)
            self.presenter.on_busy_spinner(False)
            self._arm_timeout(session)
        except Exception as e:
            if self._is_current(session):
                self._fail(session, e)

    async def _adjudicate(self, session: Session):
        try:
            verdict = await self.advisor.adjudicate(
                session.recall_record, session.object_identity, session.user_answer, session.prompt,
            )
        except Exception as e:
            if self._is_current(session):
                self._fail(session, e)
            return
        if not self._is_current(session):
            return

        indeterminate = verdict is Verdict.PENDING
        if indeterminate:
            self.status.log("flow: adjudication indeterminate (no YES/NO), treating as denied")
            verdict = Verdict.DENIED
        session.verdict = verdict
        phase = Phase.CONFIRMED if verdict is Verdict.CONFIRMED else Phase.DENIED
        self._conclude(session, phase, indeterminate=indeterminate)

    # ── transitions ─────────────────────────────────────────────────────────

    def _is_current(self, session: Session) -> bool:
        return self._session is session

    def _enter(self, session: Session, phase: Phase):
        self.status.log(f"flow: {session.phase.value} → {phase.value}")
        session.phase = phase

    def _conclude(self, session: Session, phase: Phase, indeterminate: bool = False):
        self._enter(session, phase)
        name = session.object_identity.name
        if phase is Phase.CONFIRMED:
            self.presenter.on_label_ready(name, LABEL_RECALLED, session.anchor_position)
            url = session.recall_record.remediation_url
            if url:
                self.presenter.on_remediation_link(url)
        else:
            self.presenter.on_label_ready(name, LABEL_NOT_RECALLED, session.anchor_position)
        self._finish(session, ok=True, indeterminate=indeterminate)

    def _fail(self, session: Session, exc: Exception):
        code = exc.code if isinstance(exc, RecallScanError) else errors.ERR_UNKNOWN
        self.status.log(f"flow: error {type(exc).__name__}: {exc}")
        self._enter(session, Phase.FAILED)
        self.presenter.on_notice(NOTICE_FAILED)
        self._finish(session, ok=False, error_code=code)

    def _finish(self, session: Session, ok: bool, error_code: str | None = None, indeterminate: bool = False):
        self._cancel_timeout()
        outcome = SessionOutcome(
            ok=ok, phase=session.phase, duration_ms=self._elapsed_ms(), error_code=error_code,
            identity=session.object_identity, record=session.recall_record,
            verdict=session.verdict, indeterminate=indeterminate,
        )
        self.last_outcome = outcome
        self._session = None
        self._task = None
        self.presenter.on_busy_spinner(False)
        self.status.log(f"flow: done {outcome.phase.value} dt={outcome.duration_ms}ms → idle")

    def _arm_timeout(self, session: Session):
        if self.answer_timeout is None:
            return
        loop = asyncio.get_running_loop()
        self._timeout_handle = loop.call_later(self.answer_timeout, self._expire, session)

    def _expire(self, session: Session):
        self._timeout_handle = None
        if self._is_current(session) and session.phase is Phase.AWAITING_DISAMBIGUATION:
            self._fail(session, AnswerTimeout(f"no answer within {self.answer_timeout}s"))

    def _cancel_timeout(self):
        if self._timeout_handle is not None:
            self._timeout_handle.cancel()
            self._timeout_handle = None

    def _elapsed_ms(self) -> int:
        return int((time.time() - self._t0) * 1000)
