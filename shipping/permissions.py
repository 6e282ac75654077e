# 배송 관리 API 권한 클래스를 정의합니다.

from __future__ import annotations

from typing import TYPE_CHECKING

from rest_framework import permissions

if TYPE_CHECKING:
    from rest_framework.request import Request
    from rest_framework.views import APIView


class IsShippingAdmin(permissions.BasePermission):
    """
    배송 관리자 권한 체크

    - 인증된 사용자이면서 is_staff=True인 경우에만 허용
    - 배송 구역/배송 방법/배송 추적 관리에 사용

    사용 예시:
        permission_classes = [IsShippingAdmin]
    """

    message = "배송 관리자만 접근 가능합니다."

    def has_permission(self, request: Request, view: APIView) -> bool:
        # 인증된 사용자인지 확인
        if not request.user or not request.user.is_authenticated:
            return False

        return bool(request.user.is_staff)
