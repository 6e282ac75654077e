from __future__ import annotations

from typing import Any

from rest_framework import serializers

from shipping.models import ShippingZone, ShippingZoneState


class ShippingZoneStateSerializer(serializers.ModelSerializer):
    """구역별 주 커버리지 Serializer (조회용)"""

    is_full_coverage = serializers.BooleanField(read_only=True)

    class Meta:
        model = ShippingZoneState
        fields = [
            "state_name",
            "state_code",
            "coverage_type",
            "available_sub_regions",
            "covered_sub_regions",
            "is_full_coverage",
        ]


class ZoneStateInputSerializer(serializers.Serializer):
    """
    구역 생성/수정 시 주 커버리지 입력

    주 이름/LGA 존재 여부는 참조 데이터 기준으로 서비스에서 검증합니다.
    covered_sub_regions 항목은 문자열 또는 {"name": ...} 모두 허용합니다.
    """

    state_name = serializers.CharField(required=False, allow_blank=True)
    name = serializers.CharField(required=False, allow_blank=True, write_only=True)
    state_code = serializers.CharField(required=False, allow_blank=True, max_length=10)
    coverage_type = serializers.ChoiceField(
        choices=ShippingZoneState.COVERAGE_CHOICES,
        default=ShippingZoneState.COVERAGE_ALL,
    )
    covered_sub_regions = serializers.ListField(child=serializers.JSONField(), required=False, default=list)

    def validate(self, attrs: dict[str, Any]) -> dict[str, Any]:
        if not (attrs.get("state_name") or attrs.get("name")):
            raise serializers.ValidationError({"state_name": "주 이름은 필수입니다."})
        return attrs


class ShippingZoneListSerializer(serializers.ModelSerializer):
    """배송 구역 목록용 Serializer"""

    state_count = serializers.SerializerMethodField()
    coverage_summary = serializers.CharField(read_only=True)

    class Meta:
        model = ShippingZone
        fields = [
            "id",
            "name",
            "code",
            "description",
            "is_active",
            "sort_order",
            "state_count",
            "coverage_summary",
            "created_at",
            "updated_at",
        ]

    def get_state_count(self, obj: ShippingZone) -> int:
        # prefetch_related("states") 결과 사용
        return len(obj.states.all())


class ShippingZoneDetailSerializer(ShippingZoneListSerializer):
    """배송 구역 상세 Serializer (주 커버리지, 커버리지 통계 포함)"""

    states = ShippingZoneStateSerializer(many=True, read_only=True)
    coverage_stats = serializers.SerializerMethodField()

    class Meta(ShippingZoneListSerializer.Meta):
        fields = ShippingZoneListSerializer.Meta.fields + ["states", "coverage_stats"]

    def get_coverage_stats(self, obj: ShippingZone) -> dict:
        return obj.coverage_stats()


class ShippingZoneWriteSerializer(serializers.Serializer):
    """배송 구역 생성/수정 입력 Serializer"""

    name = serializers.CharField(max_length=100)
    code = serializers.CharField(max_length=20, required=False, allow_blank=True)
    description = serializers.CharField(required=False, allow_blank=True)
    is_active = serializers.BooleanField(required=False)
    sort_order = serializers.IntegerField(required=False, min_value=0)
    states = ZoneStateInputSerializer(many=True)


class ZoneResolveQuerySerializer(serializers.Serializer):
    """주소 → 구역 매칭 쿼리 파라미터"""

    state = serializers.CharField()
    sub_region = serializers.CharField(required=False, allow_blank=True)
    city = serializers.CharField(required=False, allow_blank=True)
