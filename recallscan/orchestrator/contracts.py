from dataclasses import dataclass
from enum import Enum
from typing import Optional


class Verdict(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    DENIED = "denied"


class Phase(str, Enum):
    IDLE = "idle"
    CAPTURING = "capturing"
    IDENTIFYING = "identifying"
    LOOKING_UP = "looking_up"
    NOT_RECALLED = "not_recalled"
    AWAITING_DISAMBIGUATION = "awaiting_disambiguation"
    ADJUDICATING = "adjudicating"
    CONFIRMED = "confirmed"
    DENIED = "denied"
    FAILED = "failed"


@dataclass(frozen=True)
class SelectionPoint:
    x: float                   # normalised view coords, 0..1, origin top-left
    y: float


@dataclass(frozen=True)
class WorldPosition:
    x: float                   # metres, y is up
    y: float
    z: float


@dataclass(frozen=True)
class Frame:
    data: bytes
    media_type: str = "image/jpeg"


@dataclass(frozen=True)
class ObjectIdentity:
    name: str                  # e.g. "Acme - Blender"


@dataclass(frozen=True)
class RecallRecord:
    product_name: str
    reason: Optional[str] = None
    identifying_info: Optional[str] = None
    remediation_url: Optional[str] = None

    @classmethod
    def from_registry(cls, raw: dict) -> "RecallRecord":
        """Build from a registry entry (productName / recallReason / identificationInfo / url)."""
        return cls(
            product_name=raw.get("productName"),
            reason=raw.get("recallReason"),
            identifying_info=raw.get("identificationInfo"),
            remediation_url=raw.get("url") or None,
        )


@dataclass(frozen=True)
class DisambiguationPrompt:
    text: str


@dataclass
class Session:
    phase: Phase
    selection: SelectionPoint
    # Set once when capture succeeds; the result label anchors here
    anchor_position: Optional[WorldPosition] = None
    object_identity: Optional[ObjectIdentity] = None
    recall_record: Optional[RecallRecord] = None
    prompt: Optional[DisambiguationPrompt] = None
    user_answer: Optional[str] = None
    verdict: Verdict = Verdict.PENDING


@dataclass
class SessionOutcome:
    ok: bool
    phase: Phase
    duration_ms: int
    error_code: Optional[str] = None
    identity: Optional[ObjectIdentity] = None
    record: Optional[RecallRecord] = None
    verdict: Verdict = Verdict.PENDING
    indeterminate: bool = False    # adjudication reply held neither YES nor NO
