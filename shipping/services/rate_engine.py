"""
배송비 계산 엔진

DB 접근 없이 ShippingMethod(또는 type/name/get_config()를 가진 객체)와
계산 입력값만으로 동작하는 순수 함수 모음입니다.

- calculate_shipping_cost: 배송 방법별 배송비/이용 가능 여부 계산
- applies_to_items: 상품/카테고리 적용 대상 판별 (구역 무관)
- is_available_in_zone: 구역 단위 사전 확인
- is_currently_valid: 유효 기간 확인

이용 불가(eligible=False)는 예외가 아니라 결과 값으로 반환합니다.
설정 문서 자체가 잘못된 경우에만 MethodConfigError가 발생합니다.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Sequence, TypeVar

from django.conf import settings
from django.utils import timezone

from shipping.models.method_config import (
    FLAT_RATE,
    PICKUP,
    TABLE_SHIPPING,
    TWO_PLACES,
    FlatRateConfig,
    MethodConfigError,
    PickupConfig,
    PickupLocation,
    TableShippingConfig,
    format_weight,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


# ===== 결과 객체 =====


@dataclass(frozen=True)
class ShippingCalculation:
    """배송비 계산 결과"""

    eligible: bool
    cost: Decimal
    reason: str
    method_type: str = ""
    weight_used: Decimal = Decimal("0")
    order_value_used: Decimal = Decimal("0")


def _money(value: Decimal) -> Decimal:
    return Decimal(value).quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


def _currency(value: Decimal) -> str:
    return f"{settings.SHIPPING['CURRENCY_SYMBOL']}{_money(value):,}"


# ===== 배송비 계산 =====


def calculate_shipping_cost(
    method,
    weight: Decimal,
    order_value: Decimal,
    zone_id: int | None,
    items: Sequence = (),
) -> ShippingCalculation:
    """
    배송 방법 하나에 대한 배송비 계산

    Args:
        method: 배송 방법
        weight: 총 무게 (kg)
        order_value: 주문 금액
        zone_id: 배송지의 구역 ID (없으면 None)
        items: 장바구니 항목 (적용 대상 판별은 applies_to_items에서 처리)

    Returns:
        ShippingCalculation

    Raises:
        MethodConfigError: 설정 문서가 타입과 맞지 않는 경우
    """
    weight = Decimal(str(weight))
    order_value = Decimal(str(order_value))
    config = method.get_config()

    if isinstance(config, PickupConfig):
        eligible, cost, reason = _pickup_cost(config, zone_id)
    elif isinstance(config, FlatRateConfig):
        eligible, cost, reason = _flat_rate_cost(config, order_value, zone_id)
    elif isinstance(config, TableShippingConfig):
        eligible, cost, reason = _table_shipping_cost(config, weight, zone_id)
    else:
        raise MethodConfigError(f"알 수 없는 배송 방법 타입입니다: {method.type!r}")

    result = ShippingCalculation(
        eligible=eligible,
        cost=_money(cost),
        reason=reason,
        method_type=config.type,
        weight_used=weight,
        order_value_used=order_value,
    )
    logger.debug(
        "[RateEngine] 계산 결과 | method=%s, zone_id=%s, weight=%s, eligible=%s, cost=%s",
        method.name,
        zone_id,
        weight,
        result.eligible,
        result.cost,
    )
    return result


def _pickup_cost(config: PickupConfig, zone_id: int | None) -> tuple[bool, Decimal, str]:
    locations = _pickup_locations(config, zone_id)
    if not locations:
        return False, Decimal("0"), "No pickup locations available"
    if config.cost == 0:
        return True, config.cost, "Free pickup available"
    return True, config.cost, "Pickup available"


def _flat_rate_cost(config: FlatRateConfig, order_value: Decimal, zone_id: int | None) -> tuple[bool, Decimal, str]:
    zone_rate = config.rate_for_zone(zone_id)
    base_cost = zone_rate.cost if zone_rate else (config.default_cost or Decimal("0"))

    # 구역별 무료배송 조건이 켜져 있으면 메서드 기본 조건보다 우선
    if zone_rate and zone_rate.free_shipping and zone_rate.free_shipping.enabled:
        free_shipping = zone_rate.free_shipping
    else:
        free_shipping = config.free_shipping

    if free_shipping.is_met(order_value):
        return True, Decimal("0"), f"Free shipping on orders over {_currency(free_shipping.minimum_order_amount)}"
    return True, base_cost, "Flat rate shipping"


def _table_shipping_cost(config: TableShippingConfig, weight: Decimal, zone_id: int | None) -> tuple[bool, Decimal, str]:
    if zone_id is None:
        return False, Decimal("0"), "Zone required for table shipping"

    zone_rate = config.rate_for_zone(zone_id)
    if zone_rate is None:
        return False, Decimal("0"), "No shipping rates configured for this zone"

    weight_range = zone_rate.find_range(weight)
    if weight_range is None:
        # 구간 사이 빈 무게는 가장 가까운 구간으로 대체하지 않음
        return False, Decimal("0"), f"No shipping rate for weight {format_weight(weight)}kg"

    return (
        True,
        weight_range.cost,
        f"Weight-based rate for {format_weight(weight)}kg "
        f"({format_weight(weight_range.min_weight)}-{format_weight(weight_range.max_weight)}kg range)",
    )


# ===== 적용 대상 / 구역 / 유효 기간 =====


def applies_to_items(method, product_ids: Iterable[int], category_ids: Iterable[int]) -> bool:
    """
    장바구니 상품/카테고리에 배송 방법이 적용되는지

    - all_products: 항상 적용
    - categories: 카테고리 목록이 비어 있으면 전체 적용, 아니면 교집합이 있을 때
    - specific_products: 상품 목록 기준으로 동일
    """
    assignment = method.get_config().assignment
    if assignment.applies_to_all:
        return True

    targets = set(assignment.targets)
    candidates = category_ids if assignment.mode == "categories" else product_ids
    return any(int(candidate) in targets for candidate in candidates if candidate is not None)


def is_available_in_zone(method, zone_id: int | None) -> bool:
    """
    구역 단위 사전 확인 (배송비 계산 전 단축 판별)

    - pickup: 기본 픽업 장소가 있거나 해당 구역의 픽업 장소가 있을 때
    - flat_rate: 해당 구역 배송비가 있거나 기본 배송비가 설정되어 있을 때
    - table_shipping: 해당 구역의 무게 구간이 있을 때만
    """
    config = method.get_config()

    if isinstance(config, PickupConfig):
        return bool(config.default_locations) or config.entry_for_zone(zone_id) is not None
    if isinstance(config, FlatRateConfig):
        return config.rate_for_zone(zone_id) is not None or config.default_cost is not None
    if isinstance(config, TableShippingConfig):
        zone_rate = config.rate_for_zone(zone_id)
        return zone_rate is not None and bool(zone_rate.weight_ranges)
    return False


def is_currently_valid(method, now: datetime | None = None) -> bool:
    """valid_from/valid_until 기간 안에 있는지 (기간 미설정 시 항상 유효)"""
    now = now or timezone.now()
    return method.get_config().is_valid_at(now)


def pickup_locations_for_zone(method, zone_id: int | None) -> list[PickupLocation]:
    """구역에서 이용 가능한 (활성) 픽업 장소"""
    if method.type != PICKUP:
        return []
    return _pickup_locations(method.get_config(), zone_id)


def _pickup_locations(config: PickupConfig, zone_id: int | None) -> list[PickupLocation]:
    entry = config.entry_for_zone(zone_id)
    if entry is not None:
        active = [location for location in entry.locations if location.is_active]
        if active:
            return active
    return [location for location in config.default_locations if location.is_active]


# ===== 정렬 / 예상 배송일 =====


def sort_by_cost(entries: Iterable[T], cost_of=lambda entry: entry.cost) -> list[T]:
    """무료 배송 우선, 이후 배송비 오름차순 (동일 비용은 기존 순서 유지)"""
    return sorted(entries, key=lambda entry: (cost_of(entry) != 0, cost_of(entry)))


def estimated_delivery_date(method, today: date | None = None) -> date:
    """예상 배송일 = 오늘 + 최대 배송일"""
    today = today or timezone.localdate()
    return today + timedelta(days=method.estimated_max_days)


__all__ = [
    "FLAT_RATE",
    "PICKUP",
    "TABLE_SHIPPING",
    "ShippingCalculation",
    "applies_to_items",
    "calculate_shipping_cost",
    "estimated_delivery_date",
    "is_available_in_zone",
    "is_currently_valid",
    "pickup_locations_for_zone",
    "sort_by_cost",
]
