"""배송비 계산 엔진 단위 테스트 (DB 사용 안 함)"""

from datetime import date
from decimal import Decimal

import pytest

from shipping.models import ShippingMethod
from shipping.models.method_config import MethodConfigError
from shipping.services import rate_engine
from shipping.tests.factories import TestConstants, flat_rate_config, pickup_config, table_shipping_config

LAGOS = 1
ABUJA = 2


def make_method(method_type, config, **kwargs):
    """저장하지 않은 배송 방법"""
    return ShippingMethod(name=kwargs.pop("name", "Test Method"), type=method_type, config=config, **kwargs)


class TestFlatRate:
    """고정 배송비"""

    def test_zone_rate_used(self):
        """구역별 배송비 우선"""
        # Arrange
        method = make_method(
            "flat_rate",
            flat_rate_config(zone_rates=[{"zone": LAGOS, "cost": "1500"}], default_cost="2500"),
        )

        # Act
        result = rate_engine.calculate_shipping_cost(method, Decimal("2"), TestConstants.DEFAULT_ORDER_VALUE, LAGOS)

        # Assert
        assert result.eligible is True
        assert result.cost == TestConstants.LAGOS_FLAT_COST
        assert result.reason == "Flat rate shipping"

    def test_default_cost_for_other_zone(self):
        """구역별 배송비가 없으면 기본 배송비"""
        method = make_method(
            "flat_rate",
            flat_rate_config(zone_rates=[{"zone": LAGOS, "cost": "1500"}], default_cost="2500"),
        )

        result = rate_engine.calculate_shipping_cost(method, Decimal("2"), Decimal("100"), ABUJA)

        assert result.cost == TestConstants.DEFAULT_FLAT_COST

    def test_free_shipping_boundary_inclusive(self):
        """주문 금액 == 무료배송 기준이면 0원"""
        method = make_method(
            "flat_rate",
            flat_rate_config(
                default_cost="2500",
                free_shipping={"enabled": True, "minimum_order_amount": "50000"},
            ),
        )

        result = rate_engine.calculate_shipping_cost(method, Decimal("1"), TestConstants.FREE_SHIPPING_MINIMUM, LAGOS)

        assert result.cost == Decimal("0.00")
        assert result.reason == "Free shipping on orders over ₦50,000.00"

    def test_below_free_shipping_threshold_charged(self):
        method = make_method(
            "flat_rate",
            flat_rate_config(
                default_cost="2500",
                free_shipping={"enabled": True, "minimum_order_amount": "50000"},
            ),
        )

        result = rate_engine.calculate_shipping_cost(method, Decimal("1"), Decimal("49999.99"), LAGOS)

        assert result.cost == TestConstants.DEFAULT_FLAT_COST

    def test_zone_free_shipping_overrides_method(self):
        """구역별 무료배송 조건이 켜져 있으면 메서드 조건보다 우선"""
        method = make_method(
            "flat_rate",
            flat_rate_config(
                zone_rates=[
                    {
                        "zone": LAGOS,
                        "cost": "1500",
                        "free_shipping": {"enabled": True, "minimum_order_amount": "10000"},
                    }
                ],
                free_shipping={"enabled": True, "minimum_order_amount": "50000"},
            ),
        )

        result = rate_engine.calculate_shipping_cost(method, Decimal("1"), Decimal("10000"), LAGOS)

        assert result.cost == Decimal("0.00")
        assert "₦10,000.00" in result.reason


class TestTableShipping:
    """무게 구간별 배송비"""

    def test_first_matching_range_wins(self):
        """경계가 겹치면 설정 순서상 첫 구간"""
        # Arrange
        method = make_method(
            "table_shipping",
            table_shipping_config(
                LAGOS,
                weight_ranges=[
                    {"min_weight": "0", "max_weight": "5", "cost": "2000"},
                    {"min_weight": "5", "max_weight": "10", "cost": "3500"},
                ],
            ),
        )

        # Act
        result = rate_engine.calculate_shipping_cost(method, Decimal("5"), Decimal("0"), LAGOS)

        # Assert
        assert result.eligible is True
        assert result.cost == Decimal("2000.00")
        assert result.reason == "Weight-based rate for 5kg (0-5kg range)"

    def test_weight_in_gap_not_eligible(self):
        """구간 사이 빈 무게는 이용 불가 (가까운 구간으로 대체하지 않음)"""
        method = make_method("table_shipping", table_shipping_config(LAGOS))

        result = rate_engine.calculate_shipping_cost(method, Decimal("5.0005"), Decimal("0"), LAGOS)

        assert result.eligible is False
        assert result.reason == "No shipping rate for weight 5.0005kg"

    def test_weight_above_all_ranges_not_eligible(self):
        method = make_method("table_shipping", table_shipping_config(LAGOS))

        result = rate_engine.calculate_shipping_cost(method, Decimal("25"), Decimal("0"), LAGOS)

        assert result.eligible is False
        assert result.reason == "No shipping rate for weight 25kg"

    def test_same_inputs_give_same_cost(self):
        """같은 입력이면 몇 번을 계산해도 같은 결과"""
        method = make_method("table_shipping", table_shipping_config(LAGOS))

        first = rate_engine.calculate_shipping_cost(method, Decimal("12"), Decimal("15000"), LAGOS)
        second = rate_engine.calculate_shipping_cost(method, Decimal("12"), Decimal("15000"), LAGOS)

        assert (first.eligible, first.cost) == (True, Decimal("4500.00"))
        assert (second.eligible, second.cost) == (first.eligible, first.cost)

    def test_no_zone_not_eligible(self):
        method = make_method("table_shipping", table_shipping_config(LAGOS))

        result = rate_engine.calculate_shipping_cost(method, Decimal("1"), Decimal("0"), None)

        assert result.eligible is False
        assert result.reason == "Zone required for table shipping"

    def test_unconfigured_zone_not_eligible(self):
        method = make_method("table_shipping", table_shipping_config(LAGOS))

        result = rate_engine.calculate_shipping_cost(method, Decimal("1"), Decimal("0"), ABUJA)

        assert result.eligible is False
        assert result.reason == "No shipping rates configured for this zone"


class TestPickup:
    """매장 픽업"""

    def test_free_pickup_in_zone(self):
        method = make_method(
            "pickup",
            pickup_config(zone_locations=[{"zone": LAGOS, "locations": [TestConstants.PICKUP_LOCATION]}]),
        )

        result = rate_engine.calculate_shipping_cost(method, Decimal("1"), Decimal("0"), LAGOS)

        assert result.eligible is True
        assert result.cost == Decimal("0.00")
        assert result.reason == "Free pickup available"

    def test_paid_pickup(self):
        method = make_method(
            "pickup",
            pickup_config(default_locations=[TestConstants.PICKUP_LOCATION], cost="300"),
        )

        result = rate_engine.calculate_shipping_cost(method, Decimal("1"), Decimal("0"), None)

        assert result.cost == Decimal("300.00")
        assert result.reason == "Pickup available"

    def test_default_locations_used_when_zone_has_none(self):
        """구역 픽업 장소가 없으면 기본 픽업 장소"""
        method = make_method(
            "pickup",
            pickup_config(
                zone_locations=[{"zone": ABUJA, "locations": [TestConstants.ABUJA_PICKUP_LOCATION]}],
                default_locations=[TestConstants.PICKUP_LOCATION],
            ),
        )

        locations = rate_engine.pickup_locations_for_zone(method, LAGOS)

        assert [location.name for location in locations] == ["Ikeja Roastery"]

    def test_inactive_locations_excluded(self):
        method = make_method(
            "pickup",
            pickup_config(zone_locations=[{"zone": LAGOS, "locations": [{**TestConstants.PICKUP_LOCATION, "is_active": False}]}]),
        )

        result = rate_engine.calculate_shipping_cost(method, Decimal("1"), Decimal("0"), LAGOS)

        assert result.eligible is False
        assert result.reason == "No pickup locations available"


class TestAvailability:
    """구역 사전 확인 / 적용 대상 / 유효 기간"""

    def test_is_available_in_zone_by_type(self):
        flat_without_default = make_method("flat_rate", flat_rate_config(zone_rates=[{"zone": LAGOS, "cost": "1"}]))
        flat_with_default = make_method("flat_rate", flat_rate_config(default_cost="2500"))
        table = make_method("table_shipping", table_shipping_config(LAGOS))
        pickup_default = make_method("pickup", pickup_config(default_locations=[TestConstants.PICKUP_LOCATION]))

        assert rate_engine.is_available_in_zone(flat_without_default, LAGOS) is True
        assert rate_engine.is_available_in_zone(flat_without_default, ABUJA) is False
        assert rate_engine.is_available_in_zone(flat_with_default, ABUJA) is True
        assert rate_engine.is_available_in_zone(table, ABUJA) is False
        assert rate_engine.is_available_in_zone(pickup_default, None) is True

    def test_applies_to_items_categories(self):
        method = make_method("flat_rate", flat_rate_config(assignment="categories", categories=[10]))

        assert rate_engine.applies_to_items(method, [1], [10, 11]) is True
        assert rate_engine.applies_to_items(method, [1], [11]) is False

    def test_applies_to_items_empty_list_means_all(self):
        """specific_products인데 목록이 비어 있으면 전체 적용"""
        method = make_method("flat_rate", flat_rate_config(assignment="specific_products", products=[]))

        assert rate_engine.applies_to_items(method, [99], []) is True

    def test_is_currently_valid(self):
        expired = make_method("flat_rate", flat_rate_config(valid_until="2000-01-01"))
        open_ended = make_method("flat_rate", flat_rate_config())

        assert rate_engine.is_currently_valid(expired) is False
        assert rate_engine.is_currently_valid(open_ended) is True

    def test_broken_config_raises(self):
        """설정 문서가 잘못되면 MethodConfigError"""
        method = make_method("flat_rate", {"zone_rates": [{"zone": LAGOS, "cost": "free"}]})

        with pytest.raises(MethodConfigError):
            rate_engine.calculate_shipping_cost(method, Decimal("1"), Decimal("0"), LAGOS)


class TestSortingAndDates:
    def test_sort_by_cost_free_first_then_ascending_stable(self):
        """무료 우선, 이후 오름차순, 동일 비용은 기존 순서"""
        entries = [
            {"name": "express", "cost": Decimal("4000")},
            {"name": "standard", "cost": Decimal("1500")},
            {"name": "pickup", "cost": Decimal("0")},
            {"name": "economy", "cost": Decimal("1500")},
        ]

        result = rate_engine.sort_by_cost(entries, cost_of=lambda entry: entry["cost"])

        assert [entry["name"] for entry in result] == ["pickup", "standard", "economy", "express"]

    def test_estimated_delivery_date_uses_max_days(self):
        method = make_method("flat_rate", flat_rate_config(), estimated_max_days=5)

        assert rate_engine.estimated_delivery_date(method, date(2025, 1, 30)) == date(2025, 2, 4)
