from __future__ import annotations

from rest_framework import serializers

from shipping.models import ShippingTracking, TrackingEvent


class TrackingEventSerializer(serializers.ModelSerializer):
    """배송 추적 이력 Serializer"""

    status_display = serializers.CharField(source="get_status_display", read_only=True)

    class Meta:
        model = TrackingEvent
        fields = [
            "id",
            "status",
            "status_display",
            "description",
            "location",
            "is_customer_visible",
            "created_at",
        ]


class ShippingTrackingSerializer(serializers.ModelSerializer):
    """배송 추적 Serializer (관리자용, 전체 이력 포함)"""

    order_number = serializers.CharField(source="order.order_number", read_only=True)
    status_display = serializers.CharField(source="get_status_display", read_only=True)
    events = TrackingEventSerializer(many=True, read_only=True)

    class Meta:
        model = ShippingTracking
        fields = [
            "id",
            "order",
            "order_number",
            "tracking_number",
            "carrier_name",
            "carrier_code",
            "carrier_phone",
            "shipping_method",
            "status",
            "status_display",
            "estimated_delivery",
            "actual_delivery",
            "shipping_cost",
            "delivery_address",
            "events",
            "created_at",
            "updated_at",
        ]


class PublicTrackingSerializer(serializers.ModelSerializer):
    """운송장 번호 조회용 Serializer (고객 노출 정보만)"""

    status_display = serializers.CharField(source="get_status_display", read_only=True)
    shipping_method_name = serializers.CharField(source="shipping_method.name", read_only=True, default=None)

    class Meta:
        model = ShippingTracking
        fields = [
            "tracking_number",
            "carrier_name",
            "carrier_phone",
            "shipping_method_name",
            "status",
            "status_display",
            "estimated_delivery",
            "actual_delivery",
        ]


class TrackingCreateSerializer(serializers.Serializer):
    """배송 추적 생성 요청"""

    order_id = serializers.IntegerField(min_value=1)
    carrier_name = serializers.CharField(max_length=100)
    carrier_code = serializers.CharField(max_length=20, required=False, allow_blank=True, default="")
    carrier_phone = serializers.CharField(max_length=30, required=False, allow_blank=True, default="")
    tracking_number = serializers.CharField(max_length=40, required=False, allow_blank=True)
    estimated_delivery = serializers.DateField(required=False, allow_null=True)


class TrackingEventCreateSerializer(serializers.Serializer):
    """배송 상태 이력 추가 요청"""

    status = serializers.ChoiceField(choices=ShippingTracking.STATUS_CHOICES)
    description = serializers.CharField(max_length=255)
    location = serializers.DictField(required=False, default=dict)
    is_customer_visible = serializers.BooleanField(required=False, default=True)
