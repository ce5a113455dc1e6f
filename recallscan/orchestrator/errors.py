ERR_BUSY = "BUSY"
ERR_NO_ACTIVE_FRAME = "NO_ACTIVE_FRAME"
ERR_NO_SURFACE_HIT = "NO_SURFACE_HIT"
ERR_IDENTIFY_BACKEND = "IDENTIFY_BACKEND_ERROR"
ERR_MALFORMED_RESPONSE = "MALFORMED_RESPONSE"
ERR_EMPTY_RESPONSE = "EMPTY_RESPONSE"
ERR_REGISTRY_UNAVAILABLE = "REGISTRY_UNAVAILABLE"
ERR_ADVISOR_BACKEND = "ADVISOR_BACKEND_ERROR"
ERR_TIMEOUT = "TIMEOUT"
ERR_CANCELLED = "CANCELLED"
ERR_UNKNOWN = "UNKNOWN"


class RecallScanError(Exception):
    code = ERR_UNKNOWN

    def __init__(self, message: str = "", detail: str | None = None):
        super().__init__(message or self.code)
        self.message = message or self.code
        self.detail = detail


class CaptureError(RecallScanError):
    pass


class NoActiveFrame(CaptureError):
    code = ERR_NO_ACTIVE_FRAME


class NoSurfaceHit(CaptureError):
    code = ERR_NO_SURFACE_HIT


class IdentifyError(RecallScanError):
    pass


class IdentifyBackendError(IdentifyError):
    code = ERR_IDENTIFY_BACKEND


class MalformedResponse(IdentifyError):
    code = ERR_MALFORMED_RESPONSE


class EmptyResponse(IdentifyError):
    code = ERR_EMPTY_RESPONSE


class RegistryLookupError(RecallScanError):
    pass


class RegistryUnavailable(RegistryLookupError):
    code = ERR_REGISTRY_UNAVAILABLE


class AdvisorError(RecallScanError):
    pass


class AdvisorBackendError(AdvisorError):
    code = ERR_ADVISOR_BACKEND


class AnswerTimeout(RecallScanError):
    code = ERR_TIMEOUT
