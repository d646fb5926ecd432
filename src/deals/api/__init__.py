"""Dashboard request/response boundary."""

from .envelope import ApiResponse, ApiResult, error_result, failure, success
from .handlers import CatalogApi

__all__ = ['ApiResponse', 'ApiResult', 'CatalogApi', 'error_result', 'failure', 'success']
