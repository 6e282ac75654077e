"""지리 참조 데이터 ViewSet (주 / LGA)

관리자 화면에서 배송 구역 입력 폼을 만들 때 사용합니다.
"""

from __future__ import annotations

from drf_spectacular.utils import extend_schema, extend_schema_view
from rest_framework import permissions, viewsets
from rest_framework.request import Request
from rest_framework.response import Response

from ..geography import get_region_directory
from ..serializers.region_serializers import RegionDetailSerializer, RegionSerializer
from ..services.exceptions import NotFoundError
from .mixins import EnvelopeResponseMixin


@extend_schema_view(
    list=extend_schema(
        summary="주(state) 목록을 조회한다.",
        description="""처리 내용:
- 참조 데이터의 주 목록 (이름, 코드, 주도, 권역, LGA 수)을 반환한다.""",
        responses={200: RegionSerializer(many=True)},
        tags=["Regions"],
    ),
    retrieve=extend_schema(
        summary="주(state)의 LGA 목록을 조회한다.",
        description="""처리 내용:
- 주 이름 또는 코드(대소문자 무시)로 조회한다.""",
        responses={200: RegionDetailSerializer},
        tags=["Regions"],
    ),
)
class RegionViewSet(EnvelopeResponseMixin, viewsets.ViewSet):
    """
    지리 참조 데이터 ViewSet

    엔드포인트:
    - GET /api/shipping/regions/         - 주 목록
    - GET /api/shipping/regions/{state}/ - 주 상세 (LGA 목록)
    """

    permission_classes = [permissions.AllowAny]
    lookup_field = "state"
    lookup_value_regex = r"[^/]+"

    def list(self, request: Request) -> Response:
        regions = get_region_directory()
        return self.success_response(RegionSerializer(list(regions), many=True).data, "조회되었습니다.")

    def retrieve(self, request: Request, state: str | None = None) -> Response:
        region = get_region_directory().get(state)
        if region is None:
            raise NotFoundError(f"주(state)를 찾을 수 없습니다: {state}", details={"state": state})
        return self.success_response(RegionDetailSerializer(region).data, "조회되었습니다.")
