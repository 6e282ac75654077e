"""배송 방법 설정 (타입별 dataclass) 테스트"""

from datetime import datetime
from decimal import Decimal

import pytest
from django.utils import timezone

from shipping.models import ShippingMethod
from shipping.models.method_config import (
    AssignmentFilter,
    FlatRateConfig,
    FreeShipping,
    MethodConfigError,
    PickupConfig,
    PickupLocation,
    TableShippingConfig,
    format_weight,
    parse_method_config,
)
from shipping.tests.factories import TestConstants, flat_rate_config, pickup_config, table_shipping_config


class TestParseMethodConfig:
    """타입별 설정 변환"""

    def test_flat_rate_config_parsed(self):
        """flat_rate 문서 → FlatRateConfig"""
        # Arrange
        data = flat_rate_config(zone_rates=[{"zone": 3, "cost": "1500"}], default_cost="2500")

        # Act
        config = parse_method_config("flat_rate", data)

        # Assert
        assert isinstance(config, FlatRateConfig)
        assert config.default_cost == Decimal("2500")
        assert config.rate_for_zone(3).cost == Decimal("1500")
        assert config.rate_for_zone(4) is None
        assert config.zone_ids == {3}

    def test_zone_reference_object_accepted(self):
        """구역 참조는 {"id": ...} 형식도 허용"""
        data = flat_rate_config(zone_rates=[{"zone": {"id": "7", "name": "Lagos"}, "cost": "900"}])

        config = parse_method_config("flat_rate", data)

        assert config.rate_for_zone(7).cost == Decimal("900")

    def test_table_shipping_config_parsed(self):
        """table_shipping 문서 → TableShippingConfig"""
        config = parse_method_config("table_shipping", table_shipping_config(5))

        assert isinstance(config, TableShippingConfig)
        assert len(config.rate_for_zone(5).weight_ranges) == 2

    def test_pickup_config_parsed(self):
        """pickup 문서 → PickupConfig"""
        data = pickup_config(
            zone_locations=[{"zone": 1, "locations": [TestConstants.PICKUP_LOCATION]}],
            cost="500",
        )

        config = parse_method_config("pickup", data)

        assert isinstance(config, PickupConfig)
        assert config.entry_for_zone(1).locations[0].name == "Ikeja Roastery"
        assert config.cost == Decimal("500")

    def test_unknown_type_raises(self):
        """알 수 없는 타입"""
        with pytest.raises(MethodConfigError) as exc_info:
            parse_method_config("drone", {})

        assert exc_info.value.details["field"] == "type"

    def test_non_dict_config_raises(self):
        """설정 문서가 객체가 아님"""
        with pytest.raises(MethodConfigError):
            parse_method_config("flat_rate", ["not", "a", "dict"])

    def test_negative_cost_raises(self):
        """음수 배송비"""
        with pytest.raises(MethodConfigError):
            parse_method_config("flat_rate", flat_rate_config(zone_rates=[{"zone": 1, "cost": "-1"}]))

    def test_non_numeric_weight_raises(self):
        """숫자가 아닌 무게"""
        data = table_shipping_config(1, weight_ranges=[{"min_weight": "light", "max_weight": "5", "cost": "100"}])

        with pytest.raises(MethodConfigError):
            parse_method_config("table_shipping", data)

    def test_inverted_weight_range_raises(self):
        """최소 무게 > 최대 무게"""
        data = table_shipping_config(1, weight_ranges=[{"min_weight": "10", "max_weight": "5", "cost": "100"}])

        with pytest.raises(MethodConfigError):
            parse_method_config("table_shipping", data)

    def test_method_get_config_uses_type(self):
        """ShippingMethod.get_config는 자기 타입의 설정만 해석"""
        method = ShippingMethod(type="pickup", config=pickup_config(default_locations=[TestConstants.PICKUP_LOCATION]))

        config = method.get_config()

        assert isinstance(config, PickupConfig)
        assert config.default_locations[0].city == "Ikeja"

    def test_to_dict_round_trip_keeps_values(self):
        """저장용 문서로 변환해도 값 유지"""
        data = flat_rate_config(
            zone_rates=[{"zone": 2, "cost": "1500", "free_shipping": {"enabled": True, "minimum_order_amount": "30000"}}],
            default_cost="2500",
        )

        document = parse_method_config("flat_rate", data).to_dict()

        assert document["default_cost"] == "2500.00"
        assert document["zone_rates"][0]["cost"] == "1500.00"
        assert document["zone_rates"][0]["free_shipping"]["minimum_order_amount"] == "30000.00"
        assert "applies_to_all" not in document


class TestAssignmentFilter:
    """적용 대상"""

    def test_all_products_applies_to_all(self):
        assert AssignmentFilter.from_dict({"assignment": "all_products"}).applies_to_all is True

    def test_empty_categories_applies_to_all(self):
        """카테고리 모드인데 목록이 비어 있으면 전체 적용"""
        assignment = AssignmentFilter.from_dict({"assignment": "categories", "categories": []})

        assert assignment.applies_to_all is True

    def test_specific_products_restricted(self):
        assignment = AssignmentFilter.from_dict({"assignment": "specific_products", "products": ["4", 5]})

        assert assignment.applies_to_all is False
        assert assignment.targets == (4, 5)

    def test_unknown_assignment_raises(self):
        with pytest.raises(MethodConfigError):
            AssignmentFilter.from_dict({"assignment": "everyone"})


class TestFreeShipping:
    """무료배송 조건"""

    def test_boundary_is_inclusive(self):
        """주문 금액 == 기준 금액이면 무료"""
        free_shipping = FreeShipping(enabled=True, minimum_order_amount=TestConstants.FREE_SHIPPING_MINIMUM)

        assert free_shipping.is_met(TestConstants.FREE_SHIPPING_MINIMUM) is True
        assert free_shipping.is_met(TestConstants.FREE_SHIPPING_MINIMUM - Decimal("0.01")) is False

    def test_disabled_never_met(self):
        free_shipping = FreeShipping(enabled=False, minimum_order_amount=Decimal("0"))

        assert free_shipping.is_met(Decimal("999999")) is False


class TestPickupLocation:
    def test_incomplete_location_detected(self):
        """필수 항목 누락"""
        location = {**TestConstants.PICKUP_LOCATION, "sub_region": "  "}

        assert PickupLocation.is_complete(location) is False
        assert PickupLocation.is_complete(TestConstants.PICKUP_LOCATION) is True


class TestValidityWindow:
    """유효 기간"""

    def test_date_only_valid_until_covers_whole_day(self):
        """날짜만 지정한 valid_until은 그날 끝까지 유효"""
        config = parse_method_config("flat_rate", flat_rate_config(valid_until="2025-06-30"))
        late_evening = timezone.make_aware(datetime(2025, 6, 30, 23, 0))

        assert config.is_valid_at(late_evening) is True
        assert config.is_valid_at(timezone.make_aware(datetime(2025, 7, 1, 0, 1))) is False

    def test_valid_from_in_future(self):
        config = parse_method_config("flat_rate", flat_rate_config(valid_from="2999-01-01"))

        assert config.is_valid_at(timezone.now()) is False

    def test_invalid_date_raises(self):
        with pytest.raises(MethodConfigError):
            parse_method_config("flat_rate", flat_rate_config(valid_from="next tuesday"))


def test_format_weight_strips_trailing_zeros():
    """무게 표시 (25.000 → 25, 100 → 100)"""
    assert format_weight(Decimal("25.000")) == "25"
    assert format_weight(Decimal("100")) == "100"
    assert format_weight(Decimal("2.500")) == "2.5"
