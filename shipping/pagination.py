"""목록 API 페이지네이션 (응답 envelope 포함)"""

from __future__ import annotations

from typing import Any

from rest_framework.pagination import PageNumberPagination
from rest_framework.response import Response


class EnvelopePagination(PageNumberPagination):
    """
    페이지 번호 기반 페이지네이션

    - 쿼리 파라미터: page, limit (최대 100)
    - 응답: {message, data, error, success, totalCount, totalPages, currentPage}
    """

    page_size = 10
    page_size_query_param = "limit"
    max_page_size = 100

    def get_paginated_response(self, data: Any) -> Response:
        return Response(
            {
                "message": "조회되었습니다.",
                "data": data,
                "error": False,
                "success": True,
                "totalCount": self.page.paginator.count,
                "totalPages": self.page.paginator.num_pages,
                "currentPage": self.page.number,
            }
        )

    def get_paginated_response_schema(self, schema: dict) -> dict:
        return {
            "type": "object",
            "required": ["data", "totalCount", "totalPages", "currentPage"],
            "properties": {
                "message": {"type": "string"},
                "data": schema,
                "error": {"type": "boolean"},
                "success": {"type": "boolean"},
                "totalCount": {"type": "integer", "example": 42},
                "totalPages": {"type": "integer", "example": 5},
                "currentPage": {"type": "integer", "example": 1},
            },
        }
