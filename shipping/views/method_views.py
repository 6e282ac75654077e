"""배송 방법 ViewSet

HTTP 요청/응답 처리를 담당합니다.
설정 정규화와 검증은 MethodService에 위임합니다.
"""

from __future__ import annotations

from typing import Any

from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, extend_schema, extend_schema_view
from rest_framework import serializers as drf_serializers, status, viewsets
from rest_framework.request import Request
from rest_framework.response import Response

from ..permissions import IsShippingAdmin
from ..serializers.method_serializers import (
    ShippingMethodListSerializer,
    ShippingMethodSerializer,
    ShippingMethodWriteSerializer,
)
from ..services.method_service import MethodService
from .mixins import EnvelopeResponseMixin, request_user
from .zone_views import ErrorResponseSerializer


# ===== Swagger 문서화용 응답 Serializers =====


class MethodResponseSerializer(drf_serializers.Serializer):
    """배송 방법 응답"""

    message = drf_serializers.CharField()
    data = ShippingMethodSerializer()
    error = drf_serializers.BooleanField()
    success = drf_serializers.BooleanField()


@extend_schema_view(
    list=extend_schema(
        summary="배송 방법 목록을 조회한다.",
        description="""처리 내용:
- search: 배송 방법명/코드 검색
- type: flat_rate / table_shipping / pickup
- is_active: 활성 여부 필터""",
        parameters=[OpenApiParameter("search", OpenApiTypes.STR, description="배송 방법명/코드 검색")],
        tags=["Shipping Methods"],
    ),
    retrieve=extend_schema(
        summary="배송 방법 상세 정보를 조회한다.",
        responses={200: MethodResponseSerializer, 404: ErrorResponseSerializer},
        tags=["Shipping Methods"],
    ),
)
class ShippingMethodViewSet(EnvelopeResponseMixin, viewsets.GenericViewSet):
    """
    배송 방법 ViewSet

    엔드포인트:
    - GET    /api/shipping/methods/        - 배송 방법 목록
    - POST   /api/shipping/methods/        - 배송 방법 생성
    - GET    /api/shipping/methods/{id}/   - 배송 방법 상세
    - PUT    /api/shipping/methods/{id}/   - 배송 방법 수정 (config 전체 교체)
    - PATCH  /api/shipping/methods/{id}/   - 배송 방법 부분 수정
    - DELETE /api/shipping/methods/{id}/   - 배송 방법 삭제

    권한: 배송 관리자
    """

    permission_classes = [IsShippingAdmin]
    filterset_fields = ["type", "is_active"]
    lookup_value_regex = r"\d+"

    def get_queryset(self) -> Any:
        return MethodService.list_methods(search=self.request.query_params.get("search"))

    def get_serializer_class(self) -> type[drf_serializers.Serializer]:
        serializer_map = {
            "list": ShippingMethodListSerializer,
            "create": ShippingMethodWriteSerializer,
            "update": ShippingMethodWriteSerializer,
            "partial_update": ShippingMethodWriteSerializer,
        }
        return serializer_map.get(self.action, ShippingMethodSerializer)

    def list(self, request: Request) -> Response:
        queryset = self.filter_queryset(self.get_queryset())
        page = self.paginate_queryset(queryset)
        if page is not None:
            return self.get_paginated_response(ShippingMethodListSerializer(page, many=True).data)
        return self.success_response(ShippingMethodListSerializer(queryset, many=True).data, "조회되었습니다.")

    def retrieve(self, request: Request, pk: int | None = None) -> Response:
        method = MethodService.get_method(int(pk))
        return self.success_response(ShippingMethodSerializer(method).data, "조회되었습니다.")

    @extend_schema(
        request=ShippingMethodWriteSerializer,
        responses={201: MethodResponseSerializer, 400: ErrorResponseSerializer},
        summary="배송 방법을 생성한다.",
        description="""처리 내용:
- type에 해당하는 설정만 저장한다. (다른 타입의 설정 블록은 무시)
- 적용 대상(assignment) 기본값은 all_products
- table_shipping은 구역별 무게 구간이 1개 이상 필요하다.
- pickup은 필수 항목이 채워진 픽업 장소가 1개 이상 필요하다.
- 코드가 없으면 {FR|TS|PU}-{이름 앞 2글자}{일련번호}로 자동 생성한다.""",
        tags=["Shipping Methods"],
    )
    def create(self, request: Request) -> Response:
        serializer = ShippingMethodWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        method = MethodService.create_method(
            name=data["name"],
            method_type=data["type"],
            config=data.get("config") or {},
            description=data.get("description", ""),
            is_active=data.get("is_active", True),
            sort_order=data.get("sort_order", 0),
            estimated_delivery=dict(data["estimated_delivery"]) if data.get("estimated_delivery") else None,
            code=data.get("code") or None,
            user=request_user(request),
        )
        return self.success_response(
            ShippingMethodSerializer(method).data,
            "배송 방법이 생성되었습니다.",
            status.HTTP_201_CREATED,
        )

    @extend_schema(
        request=ShippingMethodWriteSerializer,
        responses={200: MethodResponseSerializer, 400: ErrorResponseSerializer, 404: ErrorResponseSerializer},
        summary="배송 방법을 수정한다.",
        description="""처리 내용:
- type은 변경할 수 없다.
- config가 주어지면 저장된 설정 전체를 교체한다.
- 생략한 항목은 기존 값을 유지한다.""",
        tags=["Shipping Methods"],
    )
    def update(self, request: Request, pk: int | None = None, partial: bool = False) -> Response:
        serializer = ShippingMethodWriteSerializer(data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)
        fields = dict(serializer.validated_data)
        if fields.get("estimated_delivery") is not None:
            fields["estimated_delivery"] = dict(fields["estimated_delivery"])

        method = MethodService.update_method(int(pk), user=request_user(request), **fields)
        return self.success_response(ShippingMethodSerializer(method).data, "배송 방법이 수정되었습니다.")

    @extend_schema(
        request=ShippingMethodWriteSerializer,
        responses={200: MethodResponseSerializer, 400: ErrorResponseSerializer, 404: ErrorResponseSerializer},
        summary="배송 방법을 부분 수정한다.",
        tags=["Shipping Methods"],
    )
    def partial_update(self, request: Request, pk: int | None = None) -> Response:
        return self.update(request, pk, partial=True)

    @extend_schema(
        responses={200: MethodResponseSerializer, 400: ErrorResponseSerializer, 404: ErrorResponseSerializer},
        summary="배송 방법을 삭제한다.",
        description="""처리 내용:
- 주문에서 사용 중인 배송 방법은 삭제할 수 없다. (data.orders: 참조 주문 수)""",
        tags=["Shipping Methods"],
    )
    def destroy(self, request: Request, pk: int | None = None) -> Response:
        MethodService.delete_method(int(pk))
        return self.success_response({"method_id": int(pk)}, "배송 방법이 삭제되었습니다.")
