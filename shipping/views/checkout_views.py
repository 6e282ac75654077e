"""체크아웃 배송비 계산 View

- POST /api/shipping/calculate-checkout/ - 이용 가능한 배송 방법 목록 계산
- POST /api/shipping/quote/              - 선택한 배송 방법의 배송비 확정
- GET  /api/shipping/public-methods/     - 주소 기준 배송 방법 요약
"""

from __future__ import annotations

from drf_spectacular.utils import extend_schema
from rest_framework import permissions, serializers as drf_serializers
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from ..serializers.checkout_serializers import (
    CheckoutShippingRequestSerializer,
    CheckoutShippingResultSerializer,
    MethodQuoteSerializer,
    PublicMethodsQuerySerializer,
    PublicMethodsResultSerializer,
    ShippingQuoteRequestSerializer,
)
from ..services.checkout_service import CheckoutShippingService
from ..throttles import ShippingCalculateRateThrottle
from .mixins import EnvelopeResponseMixin
from .zone_views import ErrorResponseSerializer


# ===== Swagger 문서화용 응답 Serializers =====


class CheckoutShippingResponseSerializer(drf_serializers.Serializer):
    message = drf_serializers.CharField()
    data = CheckoutShippingResultSerializer()
    error = drf_serializers.BooleanField()
    success = drf_serializers.BooleanField()


class ShippingQuoteResponseSerializer(drf_serializers.Serializer):
    message = drf_serializers.CharField()
    data = MethodQuoteSerializer()
    error = drf_serializers.BooleanField()
    success = drf_serializers.BooleanField()


class PublicMethodsResponseSerializer(drf_serializers.Serializer):
    message = drf_serializers.CharField()
    data = PublicMethodsResultSerializer()
    error = drf_serializers.BooleanField()
    success = drf_serializers.BooleanField()


class CheckoutShippingView(EnvelopeResponseMixin, APIView):
    """체크아웃 배송비 계산 (비로그인 허용)"""

    permission_classes = [permissions.AllowAny]
    throttle_classes = [ShippingCalculateRateThrottle]

    @extend_schema(
        request=CheckoutShippingRequestSerializer,
        responses={
            200: CheckoutShippingResponseSerializer,
            400: ErrorResponseSerializer,
            404: ErrorResponseSerializer,
        },
        summary="체크아웃 배송 방법과 배송비를 계산한다.",
        description="""처리 내용:
- 배송지 주소로 배송 구역을 찾는다. (없으면 zone = null, 기본 배송비와 기본 픽업 장소만 적용)
- 공개/판매 중인 상품만 계산에 포함한다.
- total_weight가 없으면 상품 무게 합계 (무게 미등록 상품은 기본 1kg)
- 유효 기간, 적용 대상, 구역 이용 가능 여부를 확인한 뒤 배송비를 계산한다.
- 무료 배송 우선, 배송비 오름차순으로 정렬한다.
- 이용 가능한 배송 방법이 없어도 성공 응답 (methods = [])""",
        tags=["Checkout Shipping"],
    )
    def post(self, request: Request) -> Response:
        serializer = CheckoutShippingRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        result = CheckoutShippingService.calculate_checkout_shipping(
            address_id=data["address_id"],
            items=[dict(item) for item in data["items"]],
            order_value=data["order_value"],
            total_weight=data.get("total_weight"),
        )

        message = "배송비가 계산되었습니다." if result.methods else "이 주소로 이용 가능한 배송 방법이 없습니다."
        return self.success_response(CheckoutShippingResultSerializer(result).data, message)


class ShippingQuoteView(EnvelopeResponseMixin, APIView):
    """선택한 배송 방법의 배송비 확정 (주문 생성 전 재계산)"""

    permission_classes = [permissions.AllowAny]
    throttle_classes = [ShippingCalculateRateThrottle]

    @extend_schema(
        request=ShippingQuoteRequestSerializer,
        responses={
            200: ShippingQuoteResponseSerializer,
            400: ErrorResponseSerializer,
            404: ErrorResponseSerializer,
        },
        summary="선택한 배송 방법의 배송비를 확정한다.",
        description="""처리 내용:
- 체크아웃 목록과 같은 규칙으로 선택한 배송 방법 하나만 다시 계산한다.
- 이용할 수 없는 배송 방법이면 400 (data.reason에 사유)
- 픽업이면 pickup_location_index로 픽업 장소를 선택할 수 있다.""",
        tags=["Checkout Shipping"],
    )
    def post(self, request: Request) -> Response:
        serializer = ShippingQuoteRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        quote = CheckoutShippingService.quote_method(
            address_id=data["address_id"],
            items=[dict(item) for item in data["items"]],
            order_value=data["order_value"],
            method_id=data["method_id"],
            pickup_location_index=data.get("pickup_location_index"),
            total_weight=data.get("total_weight"),
        )
        return self.success_response(MethodQuoteSerializer(quote).data, "배송비가 확정되었습니다.")


class PublicShippingMethodsView(EnvelopeResponseMixin, APIView):
    """주소 기준 배송 구역과 배송 방법 요약 (비로그인 허용)"""

    permission_classes = [permissions.AllowAny]
    throttle_classes = [ShippingCalculateRateThrottle]

    @extend_schema(
        parameters=[PublicMethodsQuerySerializer],
        responses={200: PublicMethodsResponseSerializer, 400: ErrorResponseSerializer},
        summary="주소에서 이용 가능한 배송 방법을 조회한다.",
        description="""처리 내용:
- 주/LGA(또는 도시)로 배송 구역을 찾는다.
- 현재 유효하고 해당 구역에서 이용 가능한 활성 배송 방법 요약을 반환한다.
- 배송비는 장바구니에 따라 달라지므로 포함하지 않는다.""",
        tags=["Checkout Shipping"],
    )
    def get(self, request: Request) -> Response:
        query = PublicMethodsQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)

        result = CheckoutShippingService.public_methods(
            query.validated_data["state"],
            query.validated_data.get("sub_region") or None,
            query.validated_data.get("city") or None,
        )
        return self.success_response(PublicMethodsResultSerializer(result).data, "조회되었습니다.")
