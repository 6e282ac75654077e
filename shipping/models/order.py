from __future__ import annotations

from decimal import Decimal

from django.conf import settings
from django.db import models


class Order(models.Model):
    """
    주문 (배송 관점에서 필요한 항목만 보관)

    - shipping_method: PROTECT (주문이 참조하는 배송 방법은 삭제 불가)
    - 주문 생성/결제는 외부 흐름에서 처리하고,
      배송비는 CheckoutShippingService.quote_method로 재계산한 값을 저장
    """

    STATUS_CHOICES = [
        ("pending", "결제대기"),
        ("confirmed", "주문확정"),
        ("processing", "배송준비중"),
        ("shipped", "배송중"),
        ("delivered", "배송완료"),
        ("canceled", "주문취소"),
    ]

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="shipping_orders",
        verbose_name="주문자",
    )
    order_number = models.CharField(max_length=30, unique=True, verbose_name="주문번호")
    status = models.CharField(
        max_length=20,
        choices=STATUS_CHOICES,
        default="pending",
        db_index=True,
        verbose_name="주문상태",
    )
    address = models.ForeignKey(
        "shipping.Address",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="orders",
        verbose_name="배송지",
    )
    shipping_method = models.ForeignKey(
        "shipping.ShippingMethod",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="orders",
        verbose_name="배송 방법",
    )
    shipping_zone = models.ForeignKey(
        "shipping.ShippingZone",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="orders",
        verbose_name="배송 구역",
    )
    shipping_cost = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0"), verbose_name="배송비")
    total_weight = models.DecimalField(max_digits=10, decimal_places=3, default=Decimal("0"), verbose_name="총 무게(kg)")
    total_amount = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0"), verbose_name="주문 금액")
    pickup_location = models.JSONField(null=True, blank=True, verbose_name="픽업 장소")
    estimated_delivery_date = models.DateField(null=True, blank=True, verbose_name="예상 배송일")
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "shipping_orders"
        verbose_name = "주문"
        verbose_name_plural = "주문 목록"
        ordering = ["-created_at"]

    def __str__(self) -> str:
        return f"주문 {self.order_number}"
