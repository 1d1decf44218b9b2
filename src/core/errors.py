from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field


class ErrorKind(str, Enum):
    VALIDATION = "validation"
    UPSTREAM_UNAVAILABLE = "upstream_unavailable"
    UPSTREAM_TIMEOUT = "upstream_timeout"
    INTERNAL = "internal"


class ClassifiedError(BaseModel):
    kind: ErrorKind = Field(description="Machine-readable failure classification.")
    message: str = Field(description="Human-readable failure summary.")
    details: Optional[List[str]] = Field(
        default=None,
        description="Field-level validation messages, one per violated field.",
    )


class GatewayError(Exception):
    kind: ErrorKind = ErrorKind.INTERNAL

    def __init__(self, message: str, *, details: Optional[List[str]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details

    def to_classified(self) -> ClassifiedError:
        return ClassifiedError(kind=self.kind, message=self.message, details=self.details)


class ContractValidationError(GatewayError):
    kind = ErrorKind.VALIDATION


class UpstreamUnavailableError(GatewayError):
    kind = ErrorKind.UPSTREAM_UNAVAILABLE


class UpstreamTimeoutError(GatewayError):
    kind = ErrorKind.UPSTREAM_TIMEOUT


class InternalGatewayError(GatewayError):
    kind = ErrorKind.INTERNAL
