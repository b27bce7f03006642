from datetime import datetime

from pydantic import BaseModel

from memshelf.errors import ErrorCode
from memshelf.schemas.common import CamelModel


class ValidationErrorDetail(BaseModel):
    path: str
    message: str
    code: str


class ErrorBody(CamelModel):
    code: ErrorCode
    message: str
    timestamp: datetime
    validation_errors: list[ValidationErrorDetail] | None = None
    stack: str | None = None


class ErrorResponse(BaseModel):
    success: bool = False
    error: ErrorBody
