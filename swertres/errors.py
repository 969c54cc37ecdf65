from __future__ import annotations


class LottoError(Exception):
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


# ---- draw input ----
class DrawValidationError(LottoError):
    """A single input line that could not become a Draw."""

    def __init__(self, raw_text: str, reason: str):
        super().__init__(reason)
        self.raw_text = raw_text
        self.reason = reason


class WrongCount(DrawValidationError): ...
class NotNumeric(DrawValidationError): ...
class OutOfRange(DrawValidationError): ...
class DuplicateValue(DrawValidationError): ...


class BatchRejected(LottoError):
    """Multi-line input with at least one bad line, or nothing usable at all."""

    def __init__(self, message: str, errors=None):
        super().__init__(message)
        self.errors = list(errors or [])


# ---- prediction ----
class PredictionError(LottoError):
    status_code = 502


class MalformedResponse(PredictionError): ...


class InvalidPredictionValue(PredictionError):
    def __init__(self, message: str, value=None, position: int | None = None):
        super().__init__(message)
        self.value = value
        self.position = position


class ServiceUnavailable(PredictionError):
    status_code = 503


class InsufficientData(LottoError): ...


class StalePrediction(LottoError):
    status_code = 409


# ---- catalog / collection misuse ----
class UnknownGame(LottoError, LookupError):
    status_code = 404


class IndexOutOfRange(LottoError, IndexError):
    status_code = 404
