"""배송 추적 ViewSet

배송 상태 이력 관리와 운송장 번호 조회를 담당합니다.
비즈니스 로직은 TrackingService에 위임합니다.
"""

from __future__ import annotations

from typing import Any

from drf_spectacular.utils import extend_schema, extend_schema_view
from rest_framework import permissions, serializers as drf_serializers, status, viewsets
from rest_framework.decorators import action
from rest_framework.request import Request
from rest_framework.response import Response

from ..permissions import IsShippingAdmin
from ..serializers.tracking_serializers import (
    PublicTrackingSerializer,
    ShippingTrackingSerializer,
    TrackingCreateSerializer,
    TrackingEventCreateSerializer,
    TrackingEventSerializer,
)
from ..services.tracking_service import TrackingService
from .mixins import EnvelopeResponseMixin, request_user
from .zone_views import ErrorResponseSerializer


# ===== Swagger 문서화용 응답 Serializers =====


class TrackingResponseSerializer(drf_serializers.Serializer):
    message = drf_serializers.CharField()
    data = ShippingTrackingSerializer()
    error = drf_serializers.BooleanField()
    success = drf_serializers.BooleanField()


class PublicTrackingResultSerializer(PublicTrackingSerializer):
    events = TrackingEventSerializer(many=True)

    class Meta(PublicTrackingSerializer.Meta):
        fields = PublicTrackingSerializer.Meta.fields + ["events"]


@extend_schema_view(
    list=extend_schema(
        summary="배송 추적 목록을 조회한다.",
        description="""처리 내용:
- status: 배송 상태 필터
- carrier_code: 배송사 코드 필터""",
        tags=["Shipping Tracking"],
    ),
    retrieve=extend_schema(
        summary="배송 추적 상세 정보를 조회한다.",
        responses={200: TrackingResponseSerializer, 404: ErrorResponseSerializer},
        tags=["Shipping Tracking"],
    ),
)
class ShippingTrackingViewSet(EnvelopeResponseMixin, viewsets.GenericViewSet):
    """
    배송 추적 ViewSet

    엔드포인트:
    - GET  /api/shipping/trackings/                    - 배송 추적 목록
    - POST /api/shipping/trackings/                    - 배송 추적 생성
    - GET  /api/shipping/trackings/{id}/               - 배송 추적 상세
    - POST /api/shipping/trackings/{id}/events/        - 배송 상태 이력 추가
    - GET  /api/shipping/trackings/overdue/            - 예상 배송일 지난 배송
    - GET  /api/shipping/trackings/number/{number}/    - 운송장 번호 조회 (공개)

    권한: 운송장 번호 조회는 공개, 나머지는 배송 관리자
    """

    filterset_fields = ["status", "carrier_code"]
    lookup_value_regex = r"\d+"

    def get_permissions(self) -> list[permissions.BasePermission]:
        if self.action == "by_number":
            return [permissions.AllowAny()]
        return [IsShippingAdmin()]

    def get_queryset(self) -> Any:
        return TrackingService.list_trackings().prefetch_related("events")

    def get_serializer_class(self) -> type[drf_serializers.Serializer]:
        serializer_map = {
            "create": TrackingCreateSerializer,
            "events": TrackingEventCreateSerializer,
            "by_number": PublicTrackingSerializer,
        }
        return serializer_map.get(self.action, ShippingTrackingSerializer)

    def list(self, request: Request) -> Response:
        queryset = self.filter_queryset(self.get_queryset())
        page = self.paginate_queryset(queryset)
        if page is not None:
            return self.get_paginated_response(ShippingTrackingSerializer(page, many=True).data)
        return self.success_response(ShippingTrackingSerializer(queryset, many=True).data, "조회되었습니다.")

    def retrieve(self, request: Request, pk: int | None = None) -> Response:
        tracking = TrackingService.get_tracking(int(pk))
        return self.success_response(ShippingTrackingSerializer(tracking).data, "조회되었습니다.")

    @extend_schema(
        request=TrackingCreateSerializer,
        responses={201: TrackingResponseSerializer, 400: ErrorResponseSerializer, 404: ErrorResponseSerializer},
        summary="주문의 배송 추적을 생성한다.",
        description="""처리 내용:
- 주문당 1건만 생성할 수 있다.
- 운송장 번호가 없으면 TRK + 날짜 + 일련번호로 생성한다.
- 접수(pending) 이력을 남기고 주문 상태를 배송준비중으로 변경한다.""",
        tags=["Shipping Tracking"],
    )
    def create(self, request: Request) -> Response:
        serializer = TrackingCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        tracking = TrackingService.create_tracking(
            data["order_id"],
            carrier_name=data["carrier_name"],
            carrier_code=data.get("carrier_code", ""),
            carrier_phone=data.get("carrier_phone", ""),
            tracking_number=data.get("tracking_number") or None,
            estimated_delivery=data.get("estimated_delivery"),
            user=request_user(request),
        )
        return self.success_response(
            ShippingTrackingSerializer(TrackingService.get_tracking(tracking.pk)).data,
            "배송 추적이 생성되었습니다.",
            status.HTTP_201_CREATED,
        )

    @extend_schema(
        request=TrackingEventCreateSerializer,
        responses={201: TrackingResponseSerializer, 400: ErrorResponseSerializer, 404: ErrorResponseSerializer},
        summary="배송 상태 이력을 추가한다.",
        description="""처리 내용:
- 배송 상태를 변경하고 이력을 남긴다.
- 주문 상태 연동: processing → 배송준비중, picked_up/in_transit → 배송중,
  delivered → 배송완료, returned/lost → 주문취소
- 종료된 배송(delivered/returned/lost/canceled)에는 이력을 추가할 수 없다.""",
        tags=["Shipping Tracking"],
    )
    @action(detail=True, methods=["post"])
    def events(self, request: Request, pk: int | None = None) -> Response:
        serializer = TrackingEventCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        TrackingService.add_event(
            int(pk),
            data["status"],
            data["description"],
            location=data.get("location") or {},
            is_customer_visible=data.get("is_customer_visible", True),
            user=request_user(request),
        )
        tracking = TrackingService.get_tracking(int(pk))
        return self.success_response(
            ShippingTrackingSerializer(tracking).data,
            "배송 상태가 변경되었습니다.",
            status.HTTP_201_CREATED,
        )

    @extend_schema(
        responses={200: ShippingTrackingSerializer(many=True)},
        summary="예상 배송일이 지난 배송 목록을 조회한다.",
        description="""처리 내용:
- 예상 배송일이 오늘 이전이고 종료 상태가 아닌 배송을 반환한다.""",
        tags=["Shipping Tracking"],
    )
    @action(detail=False, methods=["get"])
    def overdue(self, request: Request) -> Response:
        trackings = TrackingService.list_overdue().prefetch_related("events")
        return self.success_response(ShippingTrackingSerializer(trackings, many=True).data, "조회되었습니다.")

    @extend_schema(
        responses={200: PublicTrackingResultSerializer, 404: ErrorResponseSerializer},
        summary="운송장 번호로 배송 상태를 조회한다.",
        description="""처리 내용:
- 대소문자 구분 없이 조회한다.
- 고객에게 노출되는 이력만 반환한다.""",
        tags=["Shipping Tracking"],
    )
    @action(detail=False, methods=["get"], url_path=r"number/(?P<tracking_number>[A-Za-z0-9-]+)")
    def by_number(self, request: Request, tracking_number: str | None = None) -> Response:
        tracking, events = TrackingService.get_by_tracking_number(tracking_number)
        data = PublicTrackingSerializer(tracking).data
        data["events"] = TrackingEventSerializer(events, many=True).data
        return self.success_response(data, "조회되었습니다.")
