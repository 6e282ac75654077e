"""
배송 추적 서비스

- 주문별 배송 추적 생성 (운송장 번호 자동 생성)
- 배송 상태 이력 추가 및 주문 상태 동기화
- 운송장 번호로 고객용 조회
"""

from __future__ import annotations

import logging
from datetime import date
from typing import TYPE_CHECKING

from django.db import transaction
from django.db.models import QuerySet
from django.utils import timezone

from shipping.models import Order, ShippingTracking, TrackingEvent

from .base import log_service_call
from .exceptions import ConflictError, NotFoundError, ShippingValidationError

if TYPE_CHECKING:
    from django.contrib.auth.models import AbstractBaseUser

logger = logging.getLogger(__name__)

TRACKING_NUMBER_PREFIX = "TRK"

# 배송 상태 → 주문 상태
ORDER_STATUS_BY_TRACKING_STATUS = {
    "processing": "processing",
    "picked_up": "shipped",
    "in_transit": "shipped",
    "delivered": "delivered",
    "returned": "canceled",
    "lost": "canceled",
}

TRACKING_STATUSES = tuple(choice[0] for choice in ShippingTracking.STATUS_CHOICES)


class TrackingService:
    """배송 추적 관련 비즈니스 로직 서비스"""

    @staticmethod
    def get_tracking(tracking_id: int) -> ShippingTracking:
        try:
            return ShippingTracking.objects.select_related("order", "shipping_method").get(pk=tracking_id)
        except (ShippingTracking.DoesNotExist, ValueError, TypeError):
            raise NotFoundError("배송 추적 정보를 찾을 수 없습니다.", details={"tracking_id": tracking_id})

    @staticmethod
    def list_trackings(status: str | None = None) -> QuerySet[ShippingTracking]:
        queryset = ShippingTracking.objects.select_related("order", "shipping_method")
        if status:
            queryset = queryset.filter(status=status)
        return queryset

    @staticmethod
    def list_overdue(today: date | None = None) -> QuerySet[ShippingTracking]:
        """예상 배송일이 지났는데 종료 상태가 아닌 배송"""
        today = today or timezone.localdate()
        return (
            ShippingTracking.objects.select_related("order")
            .filter(estimated_delivery__lt=today)
            .exclude(status__in=ShippingTracking.FINAL_STATUSES)
            .order_by("estimated_delivery")
        )

    @staticmethod
    @log_service_call
    @transaction.atomic
    def create_tracking(
        order_id: int,
        *,
        carrier_name: str,
        carrier_code: str = "",
        carrier_phone: str = "",
        tracking_number: str | None = None,
        estimated_delivery: date | None = None,
        user: AbstractBaseUser | None = None,
    ) -> ShippingTracking:
        """
        주문의 배송 추적 생성

        - 주문당 1건
        - 운송장 번호가 없으면 TRK + 날짜 + 일련번호로 생성
        - 접수(pending) 이력을 남기고 주문을 배송준비중으로 변경

        Raises:
            NotFoundError: 주문 없음
            ConflictError: 이미 배송 추적이 있는 주문, 운송장 번호 중복
        """
        try:
            order = Order.objects.select_for_update().select_related("address").get(pk=order_id)
        except (Order.DoesNotExist, ValueError, TypeError):
            raise NotFoundError("주문을 찾을 수 없습니다.", details={"order_id": order_id})

        if ShippingTracking.objects.filter(order=order).exists():
            raise ConflictError("이미 배송 추적 정보가 있는 주문입니다.", details={"order_id": order.pk})

        carrier_name = (carrier_name or "").strip()
        if not carrier_name:
            raise ShippingValidationError("배송사명은 필수입니다.", details={"field": "carrier_name"})

        if tracking_number:
            tracking_number = tracking_number.strip().upper()
            if ShippingTracking.objects.filter(tracking_number=tracking_number).exists():
                raise ConflictError(
                    f"이미 사용 중인 운송장 번호입니다: {tracking_number}",
                    details={"field": "tracking_number"},
                )
        else:
            tracking_number = TrackingService.generate_tracking_number()

        tracking = ShippingTracking.objects.create(
            order=order,
            tracking_number=tracking_number,
            carrier_name=carrier_name,
            carrier_code=carrier_code or "",
            carrier_phone=carrier_phone or "",
            shipping_method=order.shipping_method,
            estimated_delivery=estimated_delivery or order.estimated_delivery_date,
            shipping_cost=order.shipping_cost,
            delivery_address=TrackingService._address_snapshot(order),
            created_by=user,
        )
        TrackingEvent.objects.create(
            tracking=tracking,
            status="pending",
            description="배송이 접수되었습니다.",
            created_by=user,
        )

        order.status = "processing"
        order.save(update_fields=["status", "updated_at"])

        logger.info(
            "[Tracking] 배송 추적 생성 | order_id=%d, tracking_number=%s, carrier=%s",
            order.pk,
            tracking.tracking_number,
            carrier_name,
        )
        return tracking

    @staticmethod
    @log_service_call
    @transaction.atomic
    def add_event(
        tracking_id: int,
        status: str,
        description: str,
        *,
        location: dict | None = None,
        is_customer_visible: bool = True,
        user: AbstractBaseUser | None = None,
    ) -> TrackingEvent:
        """
        배송 상태 이력 추가

        배송 상태를 갱신하고 매핑되는 주문 상태가 있으면 주문도 변경합니다.
        (delivered는 배송 완료 일시 기록)

        Raises:
            ShippingValidationError: 알 수 없는 상태, 이미 종료된 배송
        """
        if status not in TRACKING_STATUSES:
            raise ShippingValidationError(
                f"알 수 없는 배송 상태입니다: {status}",
                details={"field": "status", "allowed": list(TRACKING_STATUSES)},
            )

        tracking = TrackingService.get_tracking(tracking_id)
        if tracking.status in ShippingTracking.FINAL_STATUSES:
            raise ShippingValidationError(
                "이미 종료된 배송입니다.",
                details={"tracking_number": tracking.tracking_number, "status": tracking.status},
            )

        event = TrackingEvent.objects.create(
            tracking=tracking,
            status=status,
            description=description,
            location=location or {},
            is_customer_visible=is_customer_visible,
            created_by=user,
        )

        tracking.status = status
        update_fields = ["status", "updated_at"]
        if status == "delivered":
            tracking.actual_delivery = timezone.now()
            update_fields.append("actual_delivery")
        tracking.save(update_fields=update_fields)

        order_status = ORDER_STATUS_BY_TRACKING_STATUS.get(status)
        if order_status and tracking.order.status != order_status:
            tracking.order.status = order_status
            tracking.order.save(update_fields=["status", "updated_at"])

        logger.info(
            "[Tracking] 배송 상태 변경 | tracking_number=%s, status=%s, order_status=%s",
            tracking.tracking_number,
            status,
            order_status,
        )
        return event

    @staticmethod
    def get_by_tracking_number(tracking_number: str) -> tuple[ShippingTracking, list[TrackingEvent]]:
        """운송장 번호로 조회 (고객 노출 이력만)"""
        number = (tracking_number or "").strip().upper()
        try:
            tracking = ShippingTracking.objects.select_related("shipping_method").get(tracking_number=number)
        except ShippingTracking.DoesNotExist:
            raise NotFoundError("배송 추적 정보를 찾을 수 없습니다.", details={"tracking_number": number})
        events = list(tracking.events.filter(is_customer_visible=True).order_by("created_at", "id"))
        return tracking, events

    @staticmethod
    def generate_tracking_number(today: date | None = None) -> str:
        """TRK + YYYYMMDD + 4자리 일련번호"""
        today = today or timezone.localdate()
        prefix = f"{TRACKING_NUMBER_PREFIX}{today:%Y%m%d}"
        sequence = ShippingTracking.objects.filter(tracking_number__startswith=prefix).count() + 1
        candidate = f"{prefix}{sequence:04d}"
        while ShippingTracking.objects.filter(tracking_number=candidate).exists():
            sequence += 1
            candidate = f"{prefix}{sequence:04d}"
        return candidate

    @staticmethod
    def _address_snapshot(order: Order) -> dict:
        address = order.address
        if address is None:
            return {}
        return {
            "address_line": address.address_line,
            "city": address.city,
            "state": address.state,
            "sub_region": address.sub_region,
            "postal_code": address.postal_code,
            "country": address.country,
            "phone": address.phone,
        }
