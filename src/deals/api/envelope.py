"""Response envelope and error mapping for the dashboard boundary."""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from ..errors import ConflictError, NotFoundError, ValidationError, from_pydantic
from ..models.base import CatalogModel

logger = logging.getLogger(__name__)

SUCCESS = 0
FAILURE = 1

HTTP_OK = 200
HTTP_CREATED = 201
HTTP_BAD_REQUEST = 400
HTTP_NOT_FOUND = 404
HTTP_INTERNAL_ERROR = 500

INTERNAL_ERROR_MESSAGE = "Internal server error"


class ApiResponse(CatalogModel):
    """Body of every response: ``status`` is 0 on success and 1 on failure."""

    status: int
    message: str
    data: Optional[Any] = None

    def to_api(self) -> dict:
        # Failures carry no data key at all
        exclude = {'data'} if self.data is None else None
        return self.model_dump(by_alias=True, mode='json', exclude=exclude)


@dataclass(frozen=True)
class ApiResult:
    """An envelope paired with its HTTP-like transport code."""

    http_status: int
    body: ApiResponse

    @property
    def ok(self) -> bool:
        return self.body.status == SUCCESS

    def to_dict(self) -> Dict[str, Any]:
        return self.body.to_api()


def to_payload(value: Any) -> Any:
    """Convert models (and lists or dicts of them) to their camelCase wire form."""
    if isinstance(value, CatalogModel):
        return value.to_api()
    if isinstance(value, BaseModel):
        return value.model_dump(by_alias=True, mode='json')
    if isinstance(value, (list, tuple)):
        return [to_payload(item) for item in value]
    if isinstance(value, dict):
        return {key: to_payload(item) for key, item in value.items()}
    return value


def success(data: Any = None, message: str = "Success", http_status: int = HTTP_OK) -> ApiResult:
    return ApiResult(http_status, ApiResponse(status=SUCCESS, message=message, data=to_payload(data)))


def failure(message: str, http_status: int = HTTP_BAD_REQUEST) -> ApiResult:
    return ApiResult(http_status, ApiResponse(status=FAILURE, message=message))


def error_result(exc: Exception) -> ApiResult:
    """Map an exception raised by a service to a failure envelope."""
    if isinstance(exc, NotFoundError):
        return failure(str(exc), HTTP_NOT_FOUND)
    if isinstance(exc, (ConflictError, ValidationError)):
        return failure(str(exc), HTTP_BAD_REQUEST)
    if isinstance(exc, PydanticValidationError):
        return failure(str(from_pydantic(exc)), HTTP_BAD_REQUEST)
    logger.error("Unexpected error handling request", exc_info=exc)
    return failure(INTERNAL_ERROR_MESSAGE, HTTP_INTERNAL_ERROR)
