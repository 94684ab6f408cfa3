from __future__ import annotations


class WonderlandError(RuntimeError):
    """Base error for the voice-to-task pipeline."""


class PermissionDenied(WonderlandError):
    """Raised when the microphone cannot be opened."""


class RecorderBusyError(WonderlandError):
    pass


class RecorderNotStartedError(WonderlandError):
    pass


class UnsupportedAudioFormat(WonderlandError):
    """Raised by decoders; the normalizer absorbs it."""


class TaskParseError(WonderlandError):
    pass


class _VendorFailure(WonderlandError):
    def __init__(self, reason: str, status_code: int | None = None, details: object | None = None) -> None:
        super().__init__(reason)
        self.reason = reason
        self.status_code = status_code
        self.details = details


class TranscriptionFailed(_VendorFailure):
    pass


class ExtractionFailed(_VendorFailure):
    pass


class CalendarDispatchFailed(WonderlandError):
    def __init__(self, task_index: int, reason: str) -> None:
        super().__init__(f"task {task_index}: {reason}")
        self.task_index = task_index
        self.reason = reason
