"""배송 구역 ViewSet

HTTP 요청/응답 처리를 담당합니다.
비즈니스 로직은 ZoneService에 위임합니다.
"""

from __future__ import annotations

from typing import Any

from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, extend_schema, extend_schema_view
from rest_framework import permissions, serializers as drf_serializers, status, viewsets
from rest_framework.decorators import action
from rest_framework.request import Request
from rest_framework.response import Response

from ..permissions import IsShippingAdmin
from ..serializers.zone_serializers import (
    ShippingZoneDetailSerializer,
    ShippingZoneListSerializer,
    ShippingZoneWriteSerializer,
    ZoneResolveQuerySerializer,
)
from ..services.zone_service import ZoneService
from .mixins import EnvelopeResponseMixin, request_user


# ===== Swagger 문서화용 응답 Serializers =====


class ZoneResponseSerializer(drf_serializers.Serializer):
    """배송 구역 응답"""

    message = drf_serializers.CharField()
    data = ShippingZoneDetailSerializer()
    error = drf_serializers.BooleanField()
    success = drf_serializers.BooleanField()


class ZoneDeleteResponseSerializer(drf_serializers.Serializer):
    """배송 구역 삭제 응답"""

    message = drf_serializers.CharField()
    data = drf_serializers.DictField()
    error = drf_serializers.BooleanField()
    success = drf_serializers.BooleanField()


class ZoneResolveResponseSerializer(drf_serializers.Serializer):
    """주소 → 구역 매칭 응답 (매칭 구역이 없으면 data.zone = null)"""

    message = drf_serializers.CharField()
    data = drf_serializers.DictField()
    error = drf_serializers.BooleanField()
    success = drf_serializers.BooleanField()


class ErrorResponseSerializer(drf_serializers.Serializer):
    """에러 응답"""

    message = drf_serializers.CharField()
    data = drf_serializers.JSONField(allow_null=True)
    error = drf_serializers.BooleanField()
    success = drf_serializers.BooleanField()
    code = drf_serializers.CharField()


@extend_schema_view(
    list=extend_schema(
        summary="배송 구역 목록을 조회한다.",
        description="""처리 내용:
- 배송 구역 목록을 매칭 우선순위(sort_order, 생성 순서) 순으로 반환한다.
- search: 구역명/코드/주 이름 검색
- is_active: 활성 여부 필터""",
        parameters=[OpenApiParameter("search", OpenApiTypes.STR, description="구역명/코드/주 이름 검색")],
        tags=["Shipping Zones"],
    ),
    retrieve=extend_schema(
        summary="배송 구역 상세 정보를 조회한다.",
        description="""처리 내용:
- 주별 커버리지와 커버리지 통계를 함께 반환한다.""",
        responses={200: ZoneResponseSerializer, 404: ErrorResponseSerializer},
        tags=["Shipping Zones"],
    ),
)
class ShippingZoneViewSet(EnvelopeResponseMixin, viewsets.GenericViewSet):
    """
    배송 구역 ViewSet

    엔드포인트:
    - GET    /api/shipping/zones/                   - 구역 목록
    - POST   /api/shipping/zones/                   - 구역 생성
    - GET    /api/shipping/zones/{id}/              - 구역 상세
    - PUT    /api/shipping/zones/{id}/              - 구역 수정
    - PATCH  /api/shipping/zones/{id}/              - 구역 부분 수정
    - DELETE /api/shipping/zones/{id}/?cascade=true - 구역 삭제
    - GET    /api/shipping/zones/resolve/           - 주소 → 구역 매칭

    권한: resolve는 공개, 나머지는 배송 관리자
    """

    filterset_fields = ["is_active"]
    lookup_value_regex = r"\d+"

    def get_permissions(self) -> list[permissions.BasePermission]:
        if self.action == "resolve":
            return [permissions.AllowAny()]
        return [IsShippingAdmin()]

    def get_queryset(self) -> Any:
        return ZoneService.list_zones(search=self.request.query_params.get("search"))

    def get_serializer_class(self) -> type[drf_serializers.Serializer]:
        serializer_map = {
            "list": ShippingZoneListSerializer,
            "create": ShippingZoneWriteSerializer,
            "update": ShippingZoneWriteSerializer,
            "partial_update": ShippingZoneWriteSerializer,
            "resolve": ZoneResolveQuerySerializer,
        }
        return serializer_map.get(self.action, ShippingZoneDetailSerializer)

    # ===== 조회 =====

    def list(self, request: Request) -> Response:
        queryset = self.filter_queryset(self.get_queryset())
        page = self.paginate_queryset(queryset)
        if page is not None:
            return self.get_paginated_response(ShippingZoneListSerializer(page, many=True).data)
        return self.success_response(ShippingZoneListSerializer(queryset, many=True).data, "조회되었습니다.")

    def retrieve(self, request: Request, pk: int | None = None) -> Response:
        zone = ZoneService.get_zone(int(pk))
        return self.success_response(ShippingZoneDetailSerializer(zone).data, "조회되었습니다.")

    # ===== 생성 / 수정 / 삭제 =====

    @extend_schema(
        request=ShippingZoneWriteSerializer,
        responses={201: ZoneResponseSerializer, 400: ErrorResponseSerializer},
        summary="배송 구역을 생성한다.",
        description="""처리 내용:
- 주 이름과 LGA를 참조 데이터 기준으로 검증한다.
- coverage_type=specific이면 covered_sub_regions가 1개 이상 필요하다.
- 코드가 없으면 구역명 이니셜로 자동 생성한다.""",
        tags=["Shipping Zones"],
    )
    def create(self, request: Request) -> Response:
        serializer = ShippingZoneWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        zone = ZoneService.create_zone(
            name=data["name"],
            states=[dict(state) for state in data["states"]],
            description=data.get("description", ""),
            is_active=data.get("is_active", True),
            sort_order=data.get("sort_order", 0),
            code=data.get("code") or None,
            user=request_user(request),
        )
        return self.success_response(
            ShippingZoneDetailSerializer(ZoneService.get_zone(zone.pk)).data,
            "배송 구역이 생성되었습니다.",
            status.HTTP_201_CREATED,
        )

    @extend_schema(
        request=ShippingZoneWriteSerializer,
        responses={200: ZoneResponseSerializer, 400: ErrorResponseSerializer, 404: ErrorResponseSerializer},
        summary="배송 구역을 수정한다.",
        description="""처리 내용:
- states가 주어지면 기존 주 목록 전체를 교체한다.
- 생략한 항목은 기존 값을 유지한다.""",
        tags=["Shipping Zones"],
    )
    def update(self, request: Request, pk: int | None = None, partial: bool = False) -> Response:
        serializer = ShippingZoneWriteSerializer(data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)
        fields = dict(serializer.validated_data)
        if "states" in fields:
            fields["states"] = [dict(state) for state in fields["states"]]

        zone = ZoneService.update_zone(int(pk), user=request_user(request), **fields)
        return self.success_response(ShippingZoneDetailSerializer(zone).data, "배송 구역이 수정되었습니다.")

    @extend_schema(
        request=ShippingZoneWriteSerializer,
        responses={200: ZoneResponseSerializer, 400: ErrorResponseSerializer, 404: ErrorResponseSerializer},
        summary="배송 구역을 부분 수정한다.",
        tags=["Shipping Zones"],
    )
    def partial_update(self, request: Request, pk: int | None = None) -> Response:
        return self.update(request, pk, partial=True)

    @extend_schema(
        parameters=[
            OpenApiParameter("cascade", OpenApiTypes.BOOL, description="참조하는 배송 방법까지 삭제"),
        ],
        responses={200: ZoneDeleteResponseSerializer, 400: ErrorResponseSerializer, 404: ErrorResponseSerializer},
        summary="배송 구역을 삭제한다.",
        description="""처리 내용:
- 구역을 참조하는 배송 방법이 있으면 삭제를 거부하고 해당 배송 방법 목록을 반환한다.
- cascade=true이면 참조하는 배송 방법을 먼저 삭제한다.
- 주문에서 사용 중인 배송 방법이 있으면 cascade여도 삭제할 수 없다.""",
        tags=["Shipping Zones"],
    )
    def destroy(self, request: Request, pk: int | None = None) -> Response:
        cascade = request.query_params.get("cascade", "").lower() in ("true", "1", "yes")
        result = ZoneService.delete_zone(int(pk), cascade=cascade)
        return self.success_response(result, "배송 구역이 삭제되었습니다.")

    # ===== 주소 → 구역 매칭 =====

    @extend_schema(
        parameters=[ZoneResolveQuerySerializer],
        responses={200: ZoneResolveResponseSerializer, 400: ErrorResponseSerializer},
        summary="주소(주/LGA/도시)에 해당하는 배송 구역을 조회한다.",
        description="""처리 내용:
- 활성 구역을 우선순위 순으로 확인하여 처음 커버하는 구역을 반환한다.
- LGA가 없으면 도시명으로 대신 비교한다.
- 매칭되는 구역이 없으면 data.zone = null (에러 아님)""",
        tags=["Shipping Zones"],
    )
    @action(detail=False, methods=["get"])
    def resolve(self, request: Request) -> Response:
        query = ZoneResolveQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)

        zone = ZoneService.resolve_zone(
            query.validated_data["state"],
            query.validated_data.get("sub_region") or None,
            query.validated_data.get("city") or None,
        )
        if zone is None:
            return self.success_response({"zone": None}, "해당 주소를 커버하는 배송 구역이 없습니다.")
        return self.success_response({"zone": ShippingZoneDetailSerializer(zone).data}, "조회되었습니다.")
