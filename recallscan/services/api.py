"""
Recall scan API.

Run:
    python -m uvicorn recallscan.services.api:app --reload --host 0.0.0.0 --port 8000

Client loop:
    POST /frame   {image: base64 JPEG}     keep the latest camera frame fresh
    POST /select  {x, y}                   user tapped (normalised view coords)
    GET  /status                           poll phase + pending events (read-and-clear)
    POST /answer  {text}                   reply to the clarifying prompt
    POST /cancel                           app backgrounded / user gave up
"""
import base64
import binascii
from contextlib import asynccontextmanager

from fastapi import FastAPI

from recallscan.orchestrator import errors
from recallscan.orchestrator.contracts import SelectionPoint, SessionOutcome
from recallscan.services.models import (
    AnswerRequest, CommandResponse, EventOut, FrameRequest, FrameResponse,
    OutcomeOut, RecallOut, SelectRequest, StatusResponse,
)
from recallscan.services.wiring import Components, build_components


def _outcome_out(outcome: SessionOutcome | None) -> OutcomeOut | None:
    if outcome is None:
        return None
    rec = outcome.record
    return OutcomeOut(
        ok=outcome.ok,
        phase=outcome.phase.value,
        duration_ms=outcome.duration_ms,
        error_code=outcome.error_code,
        object_name=outcome.identity.name if outcome.identity else None,
        recall=RecallOut(
            product_name=rec.product_name,
            reason=rec.reason,
            identifying_info=rec.identifying_info,
            remediation_url=rec.remediation_url,
        ) if rec else None,
        verdict=outcome.verdict.value,
        indeterminate=outcome.indeterminate,
    )


def create_app(components: Components | None = None) -> FastAPI:
    parts = components or build_components()
    status, flow, camera = parts.status, parts.flow, parts.camera

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        flow.cancel("shutdown")
        await parts.aclose()

    app = FastAPI(title="recallscan", version="0.1.0", lifespan=lifespan)
    app.state.components = parts

    def _command(ok: bool, error_code: str | None = None) -> CommandResponse:
        return CommandResponse(ok=ok, phase=flow.phase.value, error_code=None if ok else error_code)

    @app.get("/")
    def root():
        return {"name": "recallscan", "status": "ok", "docs": "/docs", "health": "/health"}

    @app.post("/frame", response_model=FrameResponse)
    def push_frame(req: FrameRequest):
        if not hasattr(camera, "push"):
            return FrameResponse(ok=False, error=f"{type(camera).__name__} does not accept pushed frames")
        try:
            frame_bytes = base64.b64decode(req.image, validate=True)
        except (binascii.Error, ValueError):
            return FrameResponse(ok=False, error="base64 decode failed")
        if not frame_bytes:
            return FrameResponse(ok=False, error="empty frame")
        camera.push(frame_bytes)
        return FrameResponse(ok=True, size=len(frame_bytes))

    @app.post("/select", response_model=CommandResponse)
    async def select(req: SelectRequest):
        ok = flow.select(SelectionPoint(x=req.x, y=req.y))
        return _command(ok, errors.ERR_BUSY)

    @app.post("/answer", response_model=CommandResponse)
    async def answer(req: AnswerRequest):
        ok = flow.submit_answer(req.text)
        return _command(ok, "NOT_AWAITING_ANSWER")

    @app.post("/cancel", response_model=CommandResponse)
    async def cancel():
        ok = flow.cancel("client request")
        return _command(ok, "NO_ACTIVE_SESSION")

    @app.get("/status", response_model=StatusResponse)
    def get_status():
        session = flow.session
        return StatusResponse(
            phase=flow.phase.value,
            busy=flow.busy,
            object_name=session.object_identity.name if session and session.object_identity else None,
            prompt=session.prompt.text if session and session.prompt else None,
            last_outcome=_outcome_out(flow.last_outcome),
            events=[EventOut(**e) for e in status.drain_events()],
            logs=status.logs,
        )

    @app.get("/health")
    def health():
        checks = {
            "api": True,
            "inference_adapter": parts.inference.name,
            "registry_adapter": parts.registry.name,
            "camera_adapter": type(camera).__name__,
            "phase": flow.phase.value,
        }
        # mock adapters mean a key or URL is missing
        checks["all_ok"] = parts.inference.name != "mock" and parts.registry.name != "memory"
        return checks

    return app


app = create_app()
