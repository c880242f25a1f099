# 🚨 storefront/errors/__init__.py
"""🚨 Доменні винятки та стратегії їх конвертації."""

from .custom_errors import (
    AppError,
    CatalogPayloadError,
    ErrorCode,
    FetchFailure,
    StorageError,
    UserVisibleError,
)
from .strategies import HttpxErrorStrategy, IErrorHandlingStrategy, convert_error

__all__ = [
    "AppError",
    "CatalogPayloadError",
    "ErrorCode",
    "FetchFailure",
    "StorageError",
    "UserVisibleError",
    "HttpxErrorStrategy",
    "IErrorHandlingStrategy",
    "convert_error",
]
