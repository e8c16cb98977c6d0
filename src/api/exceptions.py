# src/api/exceptions.py
from fastapi import HTTPException
from starlette.status import (
    HTTP_404_NOT_FOUND,
    HTTP_409_CONFLICT,
    HTTP_503_SERVICE_UNAVAILABLE,
)


class ReportNotFoundError(HTTPException):
    def __init__(self, detail: str):
        super().__init__(status_code=HTTP_404_NOT_FOUND, detail=detail)


class BalanceConflictError(HTTPException):
    def __init__(self, detail: str):
        super().__init__(status_code=HTTP_409_CONFLICT, detail=detail)


class MetricsUnavailableHTTPError(HTTPException):
    def __init__(self, detail: str):
        super().__init__(status_code=HTTP_503_SERVICE_UNAVAILABLE, detail=detail)
