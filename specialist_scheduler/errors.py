from enum import Enum
from typing import Any, Dict, Optional


class ErrorKind(str, Enum):
    NETWORK = "NETWORK"
    TIMEOUT = "TIMEOUT"
    SERVER = "SERVER"
    VALIDATION = "VALIDATION"
    UNKNOWN = "UNKNOWN"


DEFAULT_MESSAGES = {
    ErrorKind.NETWORK: "네트워크 연결을 확인해주세요",
    ErrorKind.TIMEOUT: "요청 시간이 초과되었습니다",
    ErrorKind.SERVER: "서버 오류가 발생했습니다",
    ErrorKind.VALIDATION: "잘못된 데이터 형식입니다",
    ErrorKind.UNKNOWN: "알 수 없는 오류가 발생했습니다",
}


class SchedulerError(Exception):
    """Base class for errors reported to callers of the scheduling service."""
    def __init__(self, message: Optional[str] = None, kind: ErrorKind = ErrorKind.UNKNOWN,
                 details: Optional[Dict[str, Any]] = None):
        self.kind = kind
        self.message = message or DEFAULT_MESSAGES[kind]
        self.details = details or {}
        super().__init__(self.message)

    def to_response(self) -> Dict[str, Any]:
        response = {
            "status": "error",
            "kind": self.kind.value,
            "message": self.message,
        }
        if self.details:
            response["details"] = self.details
        return response


class PayloadValidationError(SchedulerError):
    """Raised when an inbound message does not describe valid timetable data."""
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, kind=ErrorKind.VALIDATION, details=details)
