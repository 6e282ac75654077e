from django.conf import settings
from django.db import models


class Address(models.Model):
    """
    배송지 주소

    shipping_zone은 주소에 대해 계산된 배송 구역을 메모이제이션한 값입니다.
    배송 구역이 생성/수정/삭제되면 모든 주소의 값이 비워지고,
    다음 배송비 계산 시 다시 계산됩니다.
    """

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="shipping_addresses",
        verbose_name="사용자",
    )
    address_line = models.CharField(max_length=255, verbose_name="주소")
    city = models.CharField(max_length=100, blank=True, verbose_name="도시")
    state = models.CharField(max_length=100, verbose_name="주(State)")
    sub_region = models.CharField(max_length=100, blank=True, verbose_name="LGA")
    postal_code = models.CharField(max_length=20, blank=True, verbose_name="우편번호")
    country = models.CharField(max_length=100, default="Nigeria", verbose_name="국가")
    phone = models.CharField(max_length=30, blank=True, verbose_name="연락처")

    # 구역 메모이제이션 (구역 변경 시 무효화)
    shipping_zone = models.ForeignKey(
        "shipping.ShippingZone",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="addresses",
        verbose_name="배송 구역",
    )

    is_active = models.BooleanField(default=True, verbose_name="사용 여부")
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "shipping_addresses"
        verbose_name = "배송지"
        verbose_name_plural = "배송지 목록"
        ordering = ["-created_at"]

    def __str__(self) -> str:
        parts = [self.address_line, self.sub_region, self.city, self.state]
        return ", ".join(part for part in parts if part)
