"""체크아웃 배송비 API 테스트 (calculate-checkout / quote / public-methods)"""

from django.urls import reverse

import pytest
from rest_framework import status

from shipping.services.method_service import MethodService
from shipping.tests.factories import AddressFactory, TestConstants, flat_rate_config


@pytest.fixture
def standard_method(lagos_zone):
    """Lagos 1,500 / 그 외 2,500 고정 배송비 (50,000 이상 무료)"""
    return MethodService.create_method(
        "Standard Delivery",
        "flat_rate",
        flat_rate_config(
            zone_rates=[{"zone": lagos_zone.pk, "cost": "1500"}],
            default_cost="2500",
            free_shipping={"enabled": True, "minimum_order_amount": "50000"},
        ),
        estimated_delivery={"min_days": 2, "max_days": 4},
    )


@pytest.mark.django_db
class TestCalculateCheckoutView:
    """POST /api/shipping/calculate-checkout/"""

    def test_anonymous_checkout(self, api_client, lagos_address, cart_items, standard_method, lagos_zone):
        # Arrange
        payload = {"address_id": lagos_address.pk, "items": cart_items, "order_value": "20000.00"}

        # Act
        response = api_client.post(reverse("shipping-calculate-checkout"), payload, format="json")

        # Assert
        assert response.status_code == status.HTTP_200_OK
        assert response.data["message"] == "배송비가 계산되었습니다."
        data = response.data["data"]
        assert data["zone"]["code"] == lagos_zone.code
        assert data["calculated_weight"] == "2.000"
        assert data["address"]["state"] == "Lagos"
        assert data["applicable_products"] == 1

        method = data["methods"][0]
        assert method["code"] == standard_method.code
        assert method["cost"] == "1500.00"
        assert method["is_free"] is False
        assert method["pickup_locations"] == []

    def test_free_shipping_over_minimum(self, api_client, lagos_address, cart_items, standard_method):
        payload = {
            "address_id": lagos_address.pk,
            "items": cart_items,
            "order_value": str(TestConstants.FREE_SHIPPING_MINIMUM),
        }

        response = api_client.post(reverse("shipping-calculate-checkout"), payload, format="json")

        method = response.data["data"]["methods"][0]
        assert method["cost"] == "0.00"
        assert method["is_free"] is True

    def test_no_methods_is_still_success(self, api_client, lagos_address, cart_items, lagos_zone):
        payload = {"address_id": lagos_address.pk, "items": cart_items, "order_value": "20000.00"}

        response = api_client.post(reverse("shipping-calculate-checkout"), payload, format="json")

        assert response.status_code == status.HTTP_200_OK
        assert response.data["success"] is True
        assert response.data["message"] == "이 주소로 이용 가능한 배송 방법이 없습니다."
        assert response.data["data"]["methods"] == []

    def test_unzoned_address_uses_default_cost(self, api_client, cart_items, standard_method):
        """구역 없는 주소: zone = null, 고정 배송비는 기본 배송비 적용"""
        address = AddressFactory(state="Kano", sub_region="Fagge", city="Kano")
        payload = {"address_id": address.pk, "items": cart_items, "order_value": "20000.00"}

        response = api_client.post(reverse("shipping-calculate-checkout"), payload, format="json")

        data = response.data["data"]
        assert data["zone"] is None
        assert [method["cost"] for method in data["methods"]] == ["2500.00"]

    def test_empty_items_rejected(self, api_client, lagos_address):
        payload = {"address_id": lagos_address.pk, "items": [], "order_value": "20000.00"}

        response = api_client.post(reverse("shipping-calculate-checkout"), payload, format="json")

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data["code"] == "VALIDATION_ERROR"
        assert "items" in response.data["data"]

    def test_negative_order_value_rejected(self, api_client, lagos_address, cart_items):
        payload = {"address_id": lagos_address.pk, "items": cart_items, "order_value": "-1"}

        response = api_client.post(reverse("shipping-calculate-checkout"), payload, format="json")

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert "order_value" in response.data["data"]

    def test_missing_address(self, api_client, cart_items):
        payload = {"address_id": 99999, "items": cart_items, "order_value": "20000.00"}

        response = api_client.post(reverse("shipping-calculate-checkout"), payload, format="json")

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.data["code"] == "NOT_FOUND"


@pytest.mark.django_db
class TestShippingQuoteView:
    """POST /api/shipping/quote/"""

    def test_quote_selected_method(self, api_client, lagos_address, cart_items, standard_method, lagos_zone):
        payload = {
            "address_id": lagos_address.pk,
            "items": cart_items,
            "order_value": "20000.00",
            "method_id": standard_method.pk,
        }

        response = api_client.post(reverse("shipping-quote"), payload, format="json")

        assert response.status_code == status.HTTP_200_OK
        data = response.data["data"]
        assert data["method_code"] == standard_method.code
        assert data["cost"] == "1500.00"
        assert data["weight"] == "2.000"
        assert data["zone"]["id"] == lagos_zone.pk
        assert data["pickup_location"] is None

    def test_quote_unknown_method(self, api_client, lagos_address, cart_items):
        payload = {
            "address_id": lagos_address.pk,
            "items": cart_items,
            "order_value": "20000.00",
            "method_id": 99999,
        }

        response = api_client.post(reverse("shipping-quote"), payload, format="json")

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.data["success"] is False


@pytest.mark.django_db
class TestPublicMethodsView:
    """GET /api/shipping/public-methods/"""

    def test_methods_for_lagos(self, api_client, standard_method, lagos_zone):
        response = api_client.get(reverse("shipping-public-methods"), {"state": "Lagos", "sub_region": "Ikeja"})

        assert response.status_code == status.HTTP_200_OK
        data = response.data["data"]
        assert data["zone"]["code"] == lagos_zone.code
        assert [method["code"] for method in data["methods"]] == [standard_method.code]
        assert "cost" not in data["methods"][0]

    def test_state_required(self, api_client):
        response = api_client.get(reverse("shipping-public-methods"))

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data["code"] == "VALIDATION_ERROR"
