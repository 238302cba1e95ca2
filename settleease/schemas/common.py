"""Common schemas used across multiple modules"""
from decimal import Decimal
from typing import Any

from pydantic import BaseModel

from settleease.utils.decimal_utils import to_decimal


class PaginationMeta(BaseModel):
    """Pagination metadata"""
    page: int
    page_size: int
    total_items: int
    total_pages: int


def lenient_amount(value: Any) -> Decimal:
    """Field validator body: coerce stored amounts, degrading bad values to 0"""
    return to_decimal(value)
