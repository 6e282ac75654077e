from __future__ import annotations

import logging
from typing import Any

from celery import Task, shared_task
from django.utils import timezone

from shipping.services.tracking_service import TrackingService

logger = logging.getLogger(__name__)


@shared_task(bind=True)
def report_overdue_trackings_task(self: Task) -> dict[str, Any]:
    """
    예상 배송일이 지난 배송 점검 태스크

    종료 상태(delivered/returned/lost/canceled)가 아닌데
    예상 배송일이 지난 배송을 WARNING으로 기록합니다.

    Returns:
        dict: 점검 결과 통계
    """
    today = timezone.localdate()
    overdue = list(TrackingService.list_overdue(today))

    for tracking in overdue:
        logger.warning(
            "[TrackingTask] 배송 지연 | tracking_number=%s, status=%s, estimated=%s, order=%s",
            tracking.tracking_number,
            tracking.status,
            tracking.estimated_delivery,
            tracking.order.order_number,
        )

    result = {
        "success": True,
        "checked_at": today.isoformat(),
        "overdue_count": len(overdue),
        "tracking_numbers": [tracking.tracking_number for tracking in overdue],
    }
    logger.info("[TrackingTask] 지연 배송 점검 완료 | overdue=%d", len(overdue))
    return result
