"""페이지네이션 유틸리티 모듈.

Pagination response model shared by list endpoints.
"""

import math
from typing import Any

from pydantic import BaseModel


class Page(BaseModel):
    """페이지네이션 결과 모델.

    Attributes:
        items: 현재 페이지 항목 목록 (Items for the current page)
        total: 전체 항목 수 (Total count across all pages)
        page: 현재 페이지 번호 (Current page number, 1-based)
        per_page: 페이지당 항목 수 (Items per page)
        pages: 전체 페이지 수 (Total number of pages)
    """

    items: list[Any]
    total: int
    page: int
    per_page: int
    pages: int


def build_page(items: list[Any], total: int, page: int, per_page: int) -> Page:
    """항목과 메타데이터로 Page 모델을 구성합니다 (pages = ceil(total/per_page))."""
    pages: int = math.ceil(total / per_page) if per_page > 0 else 0
    return Page(items=items, total=total, page=page, per_page=per_page, pages=pages)
