"""배송 방법 API 테스트 (/api/shipping/methods/)"""

from django.urls import reverse

import pytest
from rest_framework import status

from shipping.models import ShippingMethod
from shipping.services.method_service import MethodService
from shipping.tests.factories import (
    OrderFactory,
    ShippingMethodFactory,
    TestConstants,
    flat_rate_config,
    pickup_config,
)


@pytest.mark.django_db
class TestMethodCreate:
    """배송 방법 생성"""

    def test_create_flat_rate(self, admin_client, lagos_zone):
        # Arrange
        payload = {
            "name": "Standard Delivery",
            "type": "flat_rate",
            "estimated_delivery": {"min_days": 2, "max_days": 4},
            "config": flat_rate_config(
                zone_rates=[{"zone": lagos_zone.pk, "cost": "1500"}],
                default_cost="2500",
            ),
        }

        # Act
        response = admin_client.post(reverse("shipping-method-list"), payload, format="json")

        # Assert
        assert response.status_code == status.HTTP_201_CREATED
        data = response.data["data"]
        assert data["code"] == "FR-ST01"
        assert data["type_display"] == "고정 배송비"
        assert data["estimated_delivery"] == {"min_days": 2, "max_days": 4}
        assert data["applies_to_all"] is True

    def test_create_pickup_without_locations_rejected(self, admin_client):
        payload = {"name": "Store Pickup", "type": "pickup", "config": pickup_config()}

        response = admin_client.post(reverse("shipping-method-list"), payload, format="json")

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data["success"] is False
        assert not ShippingMethod.objects.exists()

    def test_create_unknown_type_rejected(self, admin_client):
        payload = {"name": "Drone", "type": "drone", "config": {}}

        response = admin_client.post(reverse("shipping-method-list"), payload, format="json")

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data["code"] == "VALIDATION_ERROR"
        assert "type" in response.data["data"]

    def test_estimated_delivery_range_validated(self, admin_client):
        payload = {
            "name": "Slow",
            "type": "flat_rate",
            "estimated_delivery": {"min_days": 5, "max_days": 2},
            "config": flat_rate_config(default_cost="1000"),
        }

        response = admin_client.post(reverse("shipping-method-list"), payload, format="json")

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert "estimated_delivery" in response.data["data"]

    def test_create_pickup_with_default_location(self, admin_client):
        payload = {
            "name": "Store Pickup",
            "type": "pickup",
            "config": pickup_config(default_locations=[TestConstants.PICKUP_LOCATION]),
        }

        response = admin_client.post(reverse("shipping-method-list"), payload, format="json")

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data["data"]["code"] == "PU-ST01"
        assert response.data["data"]["config"]["default_locations"][0]["name"] == "Ikeja Roastery"


@pytest.mark.django_db
class TestMethodReadUpdateDelete:
    """배송 방법 조회 / 수정 / 삭제"""

    def test_list_filtered_by_type(self, admin_client):
        ShippingMethodFactory(name="Standard")
        ShippingMethodFactory(
            name="Pickup",
            type="pickup",
            code="PU-PI01",
            config=pickup_config(default_locations=[TestConstants.PICKUP_LOCATION]),
        )

        response = admin_client.get(reverse("shipping-method-list"), {"type": "pickup"})

        assert response.status_code == status.HTTP_200_OK
        assert response.data["totalCount"] == 1
        assert response.data["data"][0]["code"] == "PU-PI01"

    def test_retrieve_missing_method(self, admin_client):
        response = admin_client.get(reverse("shipping-method-detail", kwargs={"pk": 99999}))

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.data["code"] == "NOT_FOUND"

    def test_partial_update_name(self, admin_client):
        method = ShippingMethodFactory(name="Standard")
        url = reverse("shipping-method-detail", kwargs={"pk": method.pk})

        response = admin_client.patch(url, {"name": "Standard Plus"}, format="json")

        assert response.status_code == status.HTTP_200_OK
        assert response.data["data"]["name"] == "Standard Plus"
        assert response.data["data"]["type"] == "flat_rate"

    def test_full_update_without_config_keeps_rates(self, admin_client, lagos_zone):
        """PUT에서 config를 생략하면 저장된 배송비 설정 유지"""
        # Arrange
        method = MethodService.create_method(
            "Standard",
            "flat_rate",
            flat_rate_config(zone_rates=[{"zone": lagos_zone.pk, "cost": "1500"}], default_cost="2000"),
            is_active=False,
            sort_order=3,
        )
        url = reverse("shipping-method-detail", kwargs={"pk": method.pk})

        # Act
        response = admin_client.put(url, {"name": "Standard Renamed", "type": "flat_rate"}, format="json")

        # Assert
        assert response.status_code == status.HTTP_200_OK
        data = response.data["data"]
        assert data["name"] == "Standard Renamed"
        assert data["is_active"] is False
        assert data["sort_order"] == 3
        assert data["config"]["default_cost"] == "2000.00"
        assert data["config"]["zone_rates"][0]["cost"] == "1500.00"

    def test_delete_method(self, admin_client):
        method = ShippingMethodFactory()

        response = admin_client.delete(reverse("shipping-method-detail", kwargs={"pk": method.pk}))

        assert response.status_code == status.HTTP_200_OK
        assert response.data["data"] == {"method_id": method.pk}
        assert not ShippingMethod.objects.exists()

    def test_delete_method_used_by_order(self, admin_client):
        order = OrderFactory()

        response = admin_client.delete(
            reverse("shipping-method-detail", kwargs={"pk": order.shipping_method_id})
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data["code"] == "DEPENDENCY_ERROR"
        assert response.data["data"]["orders"] == 1

    def test_non_staff_rejected(self, authenticated_client):
        response = authenticated_client.get(reverse("shipping-method-list"))

        assert response.status_code == status.HTTP_403_FORBIDDEN
