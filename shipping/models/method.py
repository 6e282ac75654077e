from __future__ import annotations

from django.conf import settings
from django.core.serializers.json import DjangoJSONEncoder
from django.db import models

from .method_config import METHOD_TYPE_CHOICES, MethodConfig, parse_method_config


class ShippingMethod(models.Model):
    """
    배송 방법

    - type: flat_rate / table_shipping / pickup (생성 후 변경 불가)
    - config: 타입에 해당하는 설정만 담은 JSON 문서
      (get_config()로 타입별 dataclass 변환)
    """

    name = models.CharField(max_length=100, verbose_name="배송 방법명")
    code = models.CharField(max_length=20, unique=True, verbose_name="배송 방법 코드")
    description = models.TextField(blank=True, verbose_name="설명")
    type = models.CharField(max_length=20, choices=METHOD_TYPE_CHOICES, verbose_name="배송 방법 유형")
    is_active = models.BooleanField(default=True, db_index=True, verbose_name="활성화 여부")
    sort_order = models.PositiveIntegerField(default=0, verbose_name="정렬 순서")

    # 예상 배송 기간
    estimated_min_days = models.PositiveIntegerField(default=1, verbose_name="최소 배송일")
    estimated_max_days = models.PositiveIntegerField(default=7, verbose_name="최대 배송일")

    config = models.JSONField(default=dict, blank=True, encoder=DjangoJSONEncoder, verbose_name="배송 방법 설정")

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
        verbose_name="생성자",
    )
    updated_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
        verbose_name="수정자",
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "shipping_methods"
        verbose_name = "배송 방법"
        verbose_name_plural = "배송 방법 목록"
        ordering = ["sort_order", "created_at", "id"]
        indexes = [
            models.Index(fields=["type", "is_active"]),
        ]

    def __str__(self) -> str:
        return f"{self.name} ({self.code})"

    def get_config(self) -> MethodConfig:
        """
        타입에 맞는 설정 dataclass 반환

        Raises:
            MethodConfigError: 설정 문서가 타입과 맞지 않거나 형식이 잘못된 경우
        """
        return parse_method_config(self.type, self.config)

    @property
    def estimated_delivery(self) -> dict:
        return {"min_days": self.estimated_min_days, "max_days": self.estimated_max_days}

    def references_zone(self, zone_id: int) -> bool:
        """설정에서 해당 구역을 참조하는지 (구역별 배송비 / 구역별 픽업 장소)"""
        key = "zone_locations" if self.type == "pickup" else "zone_rates"
        for entry in (self.config or {}).get(key) or ():
            zone = entry.get("zone") if isinstance(entry, dict) else None
            if isinstance(zone, dict):
                zone = zone.get("id")
            if zone is not None and str(zone) == str(zone_id):
                return True
        return False
