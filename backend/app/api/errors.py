from __future__ import annotations

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from app.services.diagnostics import ApiErrorHandler
from app.services.events import SignalBus, get_signal_bus
from app.services.notifications import ErrorNotifier, get_error_notifier

router = APIRouter(prefix="/errors", tags=["errors"])


class ReportedApiError(Exception):
    """Error text reported by a client, re-raised as an error-like object."""

    def __init__(self, message: str, error_type: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.error_type = error_type

    def __repr__(self) -> str:
        label = self.error_type or type(self).__name__
        return f"{label}({self.message!r})"


class ErrorClassifyRequest(BaseModel):
    message: str
    error_type: str | None = None


class ErrorClassifyResponse(BaseModel):
    code: str | None = None
    message: str
    signal: str | None = None


def get_error_handler(
    notifier: ErrorNotifier = Depends(get_error_notifier),
    event_bus: SignalBus = Depends(get_signal_bus),
) -> ApiErrorHandler:
    return ApiErrorHandler(notifier=notifier, event_bus=event_bus)


@router.post("/classify", response_model=ErrorClassifyResponse)
def classify_error(
    payload: ErrorClassifyRequest,
    handler: ApiErrorHandler = Depends(get_error_handler),
) -> ErrorClassifyResponse:
    """
    Classify an error a client caught from a generative-AI API call.

    The admin notification and any key-recovery signal fire on the server
    side exactly as they would for an in-process caller.
    """
    result = handler.classify(ReportedApiError(payload.message, payload.error_type))
    return ErrorClassifyResponse(
        code=result.code,
        message=result.message,
        signal=result.signal,
    )
