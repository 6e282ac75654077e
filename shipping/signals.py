from __future__ import annotations

import logging
from typing import Any

from django.db import transaction
from django.db.models.signals import post_delete, post_save
from django.dispatch import receiver

from shipping.models import ShippingZone, ShippingZoneState
from shipping.services.zone_service import ZoneService
from shipping.tasks.zone_tasks import invalidate_address_zone_memo

logger = logging.getLogger(__name__)


def _schedule_zone_invalidation(zone_id: int | None) -> None:
    """활성 구역 캐시는 즉시 비우고, 주소 메모 초기화는 커밋 후 큐에 등록"""
    ZoneService.invalidate_active_zones_cache()
    transaction.on_commit(lambda: invalidate_address_zone_memo.delay(zone_id))


@receiver(post_save, sender=ShippingZone)
@receiver(post_delete, sender=ShippingZone)
def handle_zone_change(sender: type[ShippingZone], instance: ShippingZone, **kwargs: Any) -> None:
    """
    배송 구역 생성/수정/삭제 시그널 핸들러

    구역의 활성화 여부나 정렬 순서가 바뀌면 기존 주소의 매칭 결과가
    달라질 수 있으므로 메모이제이션을 초기화합니다.
    """
    logger.debug("[ZoneSignal] 구역 변경 | zone_id=%s, created=%s", instance.pk, kwargs.get("created"))
    _schedule_zone_invalidation(instance.pk)


@receiver(post_save, sender=ShippingZoneState)
@receiver(post_delete, sender=ShippingZoneState)
def handle_zone_state_change(sender: type[ShippingZoneState], instance: ShippingZoneState, **kwargs: Any) -> None:
    """구역 주 커버리지 변경 시그널 핸들러"""
    _schedule_zone_invalidation(instance.zone_id)
