from __future__ import annotations

from rest_framework import serializers

from shipping.geography import Region


class RegionSerializer(serializers.Serializer):
    """주(state) 목록용 Serializer"""

    name = serializers.CharField()
    code = serializers.CharField()
    capital = serializers.CharField()
    geopolitical_zone = serializers.CharField()
    sub_region_count = serializers.SerializerMethodField()

    def get_sub_region_count(self, obj: Region) -> int:
        return len(obj.sub_regions)


class RegionDetailSerializer(RegionSerializer):
    """주 상세 (LGA 목록 포함)"""

    sub_regions = serializers.ListField(child=serializers.CharField())
