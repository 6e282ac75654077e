from __future__ import annotations

import logging
from typing import Any

from celery import Task, shared_task

from shipping.models import Address

logger = logging.getLogger(__name__)


@shared_task(bind=True)
def invalidate_address_zone_memo(self: Task, zone_id: int | None = None) -> dict[str, Any]:
    """
    주소별 배송 구역 메모이제이션 초기화 태스크

    배송 구역(또는 구역의 주 커버리지)이 변경되면 어떤 주소의 매칭 결과가
    바뀌었는지 알 수 없으므로 모든 주소의 shipping_zone을 비웁니다.
    다음 배송비 계산 시 다시 매칭됩니다.

    Args:
        self: Celery task 인스턴스
        zone_id: 변경된 구역 ID (로그용)

    Returns:
        dict: 초기화 결과 통계
    """
    cleared_count = Address.objects.filter(shipping_zone__isnull=False).update(shipping_zone=None)

    result = {
        "success": True,
        "zone_id": zone_id,
        "cleared_count": cleared_count,
    }
    logger.info("[ZoneTask] 주소 배송 구역 초기화 | zone_id=%s, cleared=%d", zone_id, cleared_count)
    return result
