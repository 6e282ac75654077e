from __future__ import annotations

from rest_framework import serializers


# ===== 요청 =====


class CartItemSerializer(serializers.Serializer):
    """장바구니 항목"""

    product_id = serializers.IntegerField(min_value=1)
    quantity = serializers.IntegerField(min_value=1, default=1)


class CheckoutShippingRequestSerializer(serializers.Serializer):
    """체크아웃 배송비 계산 요청"""

    address_id = serializers.IntegerField(min_value=1)
    items = CartItemSerializer(many=True, allow_empty=False)
    order_value = serializers.DecimalField(max_digits=14, decimal_places=2, min_value=0)
    total_weight = serializers.DecimalField(
        max_digits=10,
        decimal_places=3,
        min_value=0,
        required=False,
        allow_null=True,
        help_text="생략하면 상품 무게 합계로 계산 (무게 미등록 상품은 기본 무게 적용)",
    )


class ShippingQuoteRequestSerializer(CheckoutShippingRequestSerializer):
    """선택한 배송 방법의 배송비 확정 요청"""

    method_id = serializers.IntegerField(min_value=1)
    pickup_location_index = serializers.IntegerField(min_value=0, required=False, allow_null=True)


class PublicMethodsQuerySerializer(serializers.Serializer):
    """주소 기준 배송 방법 조회 쿼리 파라미터"""

    state = serializers.CharField()
    sub_region = serializers.CharField(required=False, allow_blank=True)
    city = serializers.CharField(required=False, allow_blank=True)


# ===== 응답 =====


class ZoneSummarySerializer(serializers.Serializer):
    id = serializers.IntegerField()
    name = serializers.CharField()
    code = serializers.CharField()


class AddressSummarySerializer(serializers.Serializer):
    id = serializers.IntegerField()
    state = serializers.CharField()
    sub_region = serializers.CharField(allow_blank=True)
    city = serializers.CharField(allow_blank=True)


class PickupLocationSerializer(serializers.Serializer):
    name = serializers.CharField()
    address = serializers.CharField()
    city = serializers.CharField()
    state = serializers.CharField()
    sub_region = serializers.CharField()
    postal_code = serializers.CharField(allow_blank=True)
    phone = serializers.CharField(allow_blank=True)
    operating_hours = serializers.DictField()
    is_active = serializers.BooleanField()


class AvailableMethodSerializer(serializers.Serializer):
    """이용 가능한 배송 방법"""

    id = serializers.IntegerField()
    name = serializers.CharField()
    code = serializers.CharField()
    type = serializers.CharField()
    description = serializers.CharField(allow_blank=True)
    cost = serializers.DecimalField(max_digits=12, decimal_places=2)
    is_free = serializers.BooleanField()
    reason = serializers.CharField()
    estimated_delivery = serializers.DictField()
    estimated_delivery_date = serializers.DateField()
    pickup_locations = PickupLocationSerializer(many=True)


class CheckoutShippingResultSerializer(serializers.Serializer):
    """체크아웃 배송비 계산 결과 (zone이 null이면 매칭 구역 없음)"""

    zone = ZoneSummarySerializer(allow_null=True)
    methods = AvailableMethodSerializer(many=True)
    calculated_weight = serializers.DecimalField(max_digits=10, decimal_places=3)
    address = AddressSummarySerializer()
    product_categories = serializers.IntegerField()
    applicable_products = serializers.IntegerField()


class MethodQuoteSerializer(serializers.Serializer):
    """배송비 확정 결과"""

    method_id = serializers.IntegerField(source="method.pk")
    method_name = serializers.CharField(source="method.name")
    method_code = serializers.CharField(source="method.code")
    method_type = serializers.CharField(source="method.type")
    zone = ZoneSummarySerializer(allow_null=True)
    cost = serializers.DecimalField(max_digits=12, decimal_places=2)
    reason = serializers.CharField()
    weight = serializers.DecimalField(max_digits=10, decimal_places=3)
    estimated_delivery_date = serializers.DateField()
    pickup_location = PickupLocationSerializer(allow_null=True)


class PublicMethodSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    name = serializers.CharField()
    code = serializers.CharField()
    type = serializers.CharField()
    description = serializers.CharField(allow_blank=True)
    estimated_delivery = serializers.DictField()


class PublicMethodsResultSerializer(serializers.Serializer):
    zone = ZoneSummarySerializer(allow_null=True)
    methods = PublicMethodSerializer(many=True)
