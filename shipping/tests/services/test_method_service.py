"""MethodService 테스트"""

from decimal import Decimal

import pytest

from shipping.models import ShippingMethod
from shipping.services.exceptions import ConflictError, DependencyError, NotFoundError, ShippingValidationError
from shipping.services.method_service import MethodService
from shipping.tests.factories import (
    OrderFactory,
    ShippingMethodFactory,
    TestConstants,
    flat_rate_config,
    pickup_config,
    table_shipping_config,
)


@pytest.mark.django_db
class TestCreateMethod:
    """배송 방법 생성"""

    def test_create_flat_rate(self, lagos_zone):
        """고정 배송비 생성 (코드 자동 생성)"""
        # Act
        method = MethodService.create_method(
            "Standard Delivery",
            "flat_rate",
            flat_rate_config(zone_rates=[{"zone": lagos_zone.pk, "cost": "1500"}], default_cost="2500"),
            estimated_delivery={"min_days": 2, "max_days": 4},
        )

        # Assert
        assert method.code == "FR-ST01"
        assert method.estimated_delivery == {"min_days": 2, "max_days": 4}
        assert method.get_config().rate_for_zone(lagos_zone.pk).cost == Decimal("1500")
        assert method.config["zone_rates"][0]["cost"] == "1500.00"

    def test_create_table_shipping(self, lagos_zone):
        method = MethodService.create_method("Weight Based", "table_shipping", table_shipping_config(lagos_zone.pk))

        assert method.code == "TS-WE01"
        assert len(method.get_config().rate_for_zone(lagos_zone.pk).weight_ranges) == 2

    def test_code_counter_increments(self):
        MethodService.create_method("Standard Delivery", "flat_rate", flat_rate_config(default_cost="1000"))

        second = MethodService.create_method("Standard Express", "flat_rate", flat_rate_config(default_cost="2000"))

        assert second.code == "FR-ST02"

    def test_default_delivery_days(self):
        method = MethodService.create_method("Economy", "flat_rate", flat_rate_config(default_cost="1000"))

        assert (method.estimated_min_days, method.estimated_max_days) == (1, 7)

    def test_invalid_delivery_days_rejected(self):
        with pytest.raises(ShippingValidationError):
            MethodService.create_method(
                "Economy",
                "flat_rate",
                flat_rate_config(default_cost="1000"),
                estimated_delivery={"min_days": 5, "max_days": 2},
            )

    def test_unknown_type_rejected(self):
        with pytest.raises(ShippingValidationError) as exc_info:
            MethodService.create_method("Drone", "drone", {})

        assert exc_info.value.details["field"] == "type"

    def test_duplicate_code_rejected(self):
        ShippingMethodFactory(code="FR-CUSTOM")

        with pytest.raises(ConflictError):
            MethodService.create_method("Custom", "flat_rate", flat_rate_config(default_cost="1"), code="fr-custom")

    def test_legacy_wrapper_keeps_only_own_type(self, lagos_zone):
        """레거시 형식이면 타입에 해당하는 블록만 저장"""
        config = {
            "flat_rate": flat_rate_config(default_cost="999"),
            "pickup": pickup_config(default_locations=[TestConstants.PICKUP_LOCATION]),
        }

        method = MethodService.create_method("Collect", "pickup", config)

        assert "default_cost" not in method.config
        assert method.config["default_locations"][0]["name"] == "Ikeja Roastery"


@pytest.mark.django_db
class TestNormalizeConfig:
    """설정 정규화"""

    def test_entries_without_zone_dropped(self, lagos_zone):
        document = MethodService.normalize_config(
            "flat_rate",
            flat_rate_config(zone_rates=[{"zone": None, "cost": "1"}, {"zone": lagos_zone.pk, "cost": "2"}]),
        )

        assert [entry["zone"] for entry in document["zone_rates"]] == [lagos_zone.pk]

    def test_missing_zone_rejected(self):
        with pytest.raises(ShippingValidationError) as exc_info:
            MethodService.normalize_config("flat_rate", flat_rate_config(zone_rates=[{"zone": 987654, "cost": "1"}]))

        assert exc_info.value.details["missing_zones"] == [987654]

    def test_assignment_lists_cleared_for_other_modes(self):
        """모드와 무관한 목록은 비움"""
        document = MethodService.normalize_config(
            "flat_rate",
            flat_rate_config(default_cost="1", assignment="categories", categories=[3], products=[8]),
        )

        assert document["categories"] == [3]
        assert document["products"] == []
        assert "applies_to_all" not in document

    def test_table_requires_weight_ranges(self, lagos_zone):
        with pytest.raises(ShippingValidationError) as exc_info:
            MethodService.normalize_config("table_shipping", {"zone_rates": [{"zone": lagos_zone.pk, "weight_ranges": []}]})

        assert exc_info.value.details["field"] == "weight_ranges"

    def test_table_requires_zone_rates(self):
        with pytest.raises(ShippingValidationError) as exc_info:
            MethodService.normalize_config("table_shipping", {"zone_rates": []})

        assert exc_info.value.details["field"] == "zone_rates"

    def test_incomplete_pickup_locations_filtered(self, lagos_zone):
        """필수 항목이 빠진 픽업 장소는 제거"""
        incomplete = {**TestConstants.PICKUP_LOCATION, "address": ""}

        document = MethodService.normalize_config(
            "pickup",
            pickup_config(
                zone_locations=[{"zone": lagos_zone.pk, "locations": [incomplete, TestConstants.PICKUP_LOCATION]}],
            ),
        )

        assert len(document["zone_locations"][0]["locations"]) == 1

    def test_pickup_without_valid_locations_rejected(self, lagos_zone):
        incomplete = {**TestConstants.PICKUP_LOCATION, "city": ""}

        with pytest.raises(ShippingValidationError):
            MethodService.normalize_config(
                "pickup",
                pickup_config(zone_locations=[{"zone": lagos_zone.pk, "locations": [incomplete]}]),
            )

    def test_malformed_value_becomes_validation_error(self):
        """설정 값 형식 오류는 ShippingValidationError로 변환"""
        with pytest.raises(ShippingValidationError):
            MethodService.normalize_config("flat_rate", flat_rate_config(default_cost="cheap"))

    def test_validity_window_order_checked(self):
        with pytest.raises(ShippingValidationError):
            MethodService.normalize_config(
                "flat_rate",
                flat_rate_config(default_cost="1", valid_from="2025-06-01", valid_until="2025-05-01"),
            )


@pytest.mark.django_db
class TestUpdateDeleteMethod:
    def test_type_change_rejected(self):
        method = ShippingMethodFactory()

        with pytest.raises(ShippingValidationError):
            MethodService.update_method(method.pk, type="pickup")

    def test_update_config_renormalized(self, lagos_zone):
        method = ShippingMethodFactory()

        updated = MethodService.update_method(
            method.pk,
            config=flat_rate_config(zone_rates=[{"zone": str(lagos_zone.pk), "cost": "700"}]),
            is_active=False,
        )

        assert updated.config["zone_rates"][0] == {"zone": lagos_zone.pk, "cost": "700.00", "free_shipping": None}
        assert updated.is_active is False

    def test_delete_unused_method(self):
        method = ShippingMethodFactory()

        MethodService.delete_method(method.pk)

        assert not ShippingMethod.objects.filter(pk=method.pk).exists()

    def test_delete_blocked_by_order(self):
        order = OrderFactory()

        with pytest.raises(DependencyError) as exc_info:
            MethodService.delete_method(order.shipping_method_id)

        assert exc_info.value.details["orders"] == 1

    def test_get_missing_method(self):
        with pytest.raises(NotFoundError):
            MethodService.get_method(424242)
