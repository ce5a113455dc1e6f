from typing import Literal, Optional

from pydantic import BaseModel, Field


class FrameRequest(BaseModel):
    image: str  # base64 JPEG


class FrameResponse(BaseModel):
    ok: bool
    size: int = 0
    error: Optional[str] = None


class SelectRequest(BaseModel):
    # normalised view coordinates, origin top-left
    x: float = Field(ge=0.0, le=1.0)
    y: float = Field(ge=0.0, le=1.0)


class AnswerRequest(BaseModel):
    text: str


class CommandResponse(BaseModel):
    ok: bool
    phase: str
    error_code: Optional[str] = None


class PositionOut(BaseModel):
    x: float
    y: float
    z: float


class EventOut(BaseModel):
    kind: Literal["busy_spinner", "label_ready", "prompt_ready", "remediation_link", "notice"]
    busy: Optional[bool] = None
    title: Optional[str] = None
    status: Optional[str] = None
    position: Optional[PositionOut] = None
    text: Optional[str] = None
    url: Optional[str] = None


class RecallOut(BaseModel):
    product_name: str
    reason: Optional[str] = None
    identifying_info: Optional[str] = None
    remediation_url: Optional[str] = None


class OutcomeOut(BaseModel):
    ok: bool
    phase: str
    duration_ms: int
    error_code: Optional[str] = None
    object_name: Optional[str] = None
    recall: Optional[RecallOut] = None
    verdict: str
    indeterminate: bool = False


class StatusResponse(BaseModel):
    phase: str
    busy: bool
    object_name: Optional[str] = None
    prompt: Optional[str] = None
    last_outcome: Optional[OutcomeOut] = None
    events: list[EventOut]
    logs: list[str]
