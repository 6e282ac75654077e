from __future__ import annotations

from decimal import Decimal

from django.conf import settings
from django.db import models


class ShippingTracking(models.Model):
    """
    배송 추적 (주문당 1건)

    상태 변경은 TrackingEvent로 이력을 남기며,
    배송 상태에 따라 주문 상태도 함께 변경됩니다.
    """

    STATUS_CHOICES = [
        ("pending", "접수"),
        ("processing", "준비중"),
        ("picked_up", "집하"),
        ("in_transit", "배송중"),
        ("out_for_delivery", "배달출발"),
        ("delivered", "배송완료"),
        ("attempted", "배달시도"),
        ("returned", "반송"),
        ("lost", "분실"),
        ("canceled", "취소"),
    ]

    # 종료 상태 (지연 배송 조회에서 제외)
    FINAL_STATUSES = ("delivered", "returned", "lost", "canceled")

    order = models.OneToOneField(
        "shipping.Order",
        on_delete=models.CASCADE,
        related_name="tracking",
        verbose_name="주문",
    )
    tracking_number = models.CharField(max_length=40, unique=True, verbose_name="운송장 번호")
    carrier_name = models.CharField(max_length=100, verbose_name="배송사")
    carrier_code = models.CharField(max_length=20, blank=True, verbose_name="배송사 코드")
    carrier_phone = models.CharField(max_length=30, blank=True, verbose_name="배송사 연락처")
    shipping_method = models.ForeignKey(
        "shipping.ShippingMethod",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="trackings",
        verbose_name="배송 방법",
    )
    status = models.CharField(
        max_length=20,
        choices=STATUS_CHOICES,
        default="pending",
        db_index=True,
        verbose_name="배송 상태",
    )
    estimated_delivery = models.DateField(null=True, blank=True, verbose_name="예상 배송일")
    actual_delivery = models.DateTimeField(null=True, blank=True, verbose_name="배송 완료 일시")
    shipping_cost = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0"), verbose_name="배송비")
    delivery_address = models.JSONField(default=dict, blank=True, verbose_name="배송지 스냅샷")
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
        verbose_name="생성자",
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "shipping_trackings"
        verbose_name = "배송 추적"
        verbose_name_plural = "배송 추적 목록"
        ordering = ["-created_at"]

    def __str__(self) -> str:
        return f"{self.tracking_number} ({self.status})"


class TrackingEvent(models.Model):
    """배송 추적 이력 (추가만 가능)"""

    tracking = models.ForeignKey(
        ShippingTracking,
        on_delete=models.CASCADE,
        related_name="events",
        verbose_name="배송 추적",
    )
    status = models.CharField(max_length=20, choices=ShippingTracking.STATUS_CHOICES, verbose_name="상태")
    description = models.CharField(max_length=255, verbose_name="내용")
    location = models.JSONField(default=dict, blank=True, verbose_name="위치")
    is_customer_visible = models.BooleanField(default=True, verbose_name="고객 노출 여부")
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
        verbose_name="등록자",
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "shipping_tracking_events"
        verbose_name = "배송 추적 이력"
        verbose_name_plural = "배송 추적 이력 목록"
        ordering = ["created_at", "id"]

    def __str__(self) -> str:
        return f"{self.tracking_id}:{self.status}"
