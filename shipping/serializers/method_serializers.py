from __future__ import annotations

import logging

from rest_framework import serializers

from shipping.models import ShippingMethod
from shipping.models.method_config import METHOD_TYPE_CHOICES, MethodConfigError

logger = logging.getLogger(__name__)


class EstimatedDeliverySerializer(serializers.Serializer):
    """예상 배송 기간 (일)"""

    min_days = serializers.IntegerField(min_value=0, default=1)
    max_days = serializers.IntegerField(min_value=0, default=7)

    def validate(self, attrs):
        if attrs["max_days"] < attrs["min_days"]:
            raise serializers.ValidationError("최대 배송일은 최소 배송일보다 작을 수 없습니다.")
        return attrs


class ShippingMethodListSerializer(serializers.ModelSerializer):
    """배송 방법 목록용 Serializer"""

    estimated_delivery = serializers.DictField(read_only=True)
    type_display = serializers.CharField(source="get_type_display", read_only=True)

    class Meta:
        model = ShippingMethod
        fields = [
            "id",
            "name",
            "code",
            "type",
            "type_display",
            "is_active",
            "sort_order",
            "estimated_delivery",
            "updated_at",
        ]


class ShippingMethodSerializer(ShippingMethodListSerializer):
    """
    배송 방법 상세 Serializer

    config는 저장된 타입별 설정 문서 그대로 반환하며,
    applies_to_all은 적용 대상 필터가 전체 상품에 적용되는지 여부입니다.
    """

    applies_to_all = serializers.SerializerMethodField()

    class Meta(ShippingMethodListSerializer.Meta):
        fields = ShippingMethodListSerializer.Meta.fields + [
            "description",
            "config",
            "applies_to_all",
            "created_at",
        ]

    def get_applies_to_all(self, obj: ShippingMethod) -> bool | None:
        try:
            return obj.get_config().assignment.applies_to_all
        except MethodConfigError:
            logger.warning("[Method] 설정 파싱 실패 | method_id=%d", obj.pk)
            return None


class ShippingMethodWriteSerializer(serializers.Serializer):
    """
    배송 방법 생성/수정 입력 Serializer

    config 내용 검증/정규화는 MethodService에서 처리합니다.
    """

    name = serializers.CharField(max_length=100)
    type = serializers.ChoiceField(choices=METHOD_TYPE_CHOICES)
    code = serializers.CharField(max_length=20, required=False, allow_blank=True)
    description = serializers.CharField(required=False, allow_blank=True)
    is_active = serializers.BooleanField(required=False)
    sort_order = serializers.IntegerField(required=False, min_value=0)
    estimated_delivery = EstimatedDeliverySerializer(required=False)
    config = serializers.JSONField(required=False)

    def validate_config(self, value):
        if not isinstance(value, dict):
            raise serializers.ValidationError("배송 방법 설정은 객체여야 합니다.")
        return value
