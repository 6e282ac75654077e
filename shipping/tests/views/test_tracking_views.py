"""배송 추적 API 테스트 (/api/shipping/trackings/)"""

from datetime import timedelta

from django.urls import reverse
from django.utils import timezone

import pytest
from rest_framework import status

from shipping.models import ShippingTracking
from shipping.tests.factories import OrderFactory, ShippingTrackingFactory, TrackingEventFactory


@pytest.mark.django_db
class TestTrackingAdminViews:
    """배송 추적 관리 (배송 관리자)"""

    def test_create_tracking(self, admin_client):
        # Arrange
        order = OrderFactory()
        payload = {"order_id": order.pk, "carrier_name": "GIG Logistics", "carrier_code": "GIG"}

        # Act
        response = admin_client.post(reverse("shipping-tracking-list"), payload, format="json")

        # Assert
        assert response.status_code == status.HTTP_201_CREATED
        data = response.data["data"]
        assert data["order_number"] == order.order_number
        assert data["status"] == "pending"
        assert data["tracking_number"].startswith("TRK")
        assert len(data["events"]) == 1

    def test_create_duplicate_tracking(self, admin_client):
        tracking = ShippingTrackingFactory()
        payload = {"order_id": tracking.order_id, "carrier_name": "DHL"}

        response = admin_client.post(reverse("shipping-tracking-list"), payload, format="json")

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data["code"] == "CONFLICT"
        assert ShippingTracking.objects.count() == 1

    def test_add_event(self, admin_client):
        tracking = ShippingTrackingFactory()
        payload = {"status": "in_transit", "description": "Lagos 허브 출발", "location": {"city": "Ikeja"}}

        response = admin_client.post(
            reverse("shipping-tracking-events", kwargs={"pk": tracking.pk}), payload, format="json"
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data["data"]["status"] == "in_transit"
        assert response.data["data"]["events"][-1]["description"] == "Lagos 허브 출발"

    def test_add_event_invalid_status(self, admin_client):
        tracking = ShippingTrackingFactory()

        response = admin_client.post(
            reverse("shipping-tracking-events", kwargs={"pk": tracking.pk}),
            {"status": "teleported", "description": "???"},
            format="json",
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data["code"] == "VALIDATION_ERROR"

    def test_list_filter_by_status(self, admin_client):
        ShippingTrackingFactory(status="pending")
        ShippingTrackingFactory(status="in_transit")

        response = admin_client.get(reverse("shipping-tracking-list"), {"status": "in_transit"})

        assert response.status_code == status.HTTP_200_OK
        assert response.data["totalCount"] == 1
        assert response.data["data"][0]["status"] == "in_transit"

    def test_overdue(self, admin_client):
        today = timezone.localdate()
        late = ShippingTrackingFactory(estimated_delivery=today - timedelta(days=1), status="in_transit")
        ShippingTrackingFactory(estimated_delivery=today + timedelta(days=2), status="in_transit")

        response = admin_client.get(reverse("shipping-tracking-overdue"))

        assert response.status_code == status.HTTP_200_OK
        assert [item["tracking_number"] for item in response.data["data"]] == [late.tracking_number]

    def test_non_staff_rejected(self, authenticated_client):
        response = authenticated_client.get(reverse("shipping-tracking-list"))

        assert response.status_code == status.HTTP_403_FORBIDDEN


@pytest.mark.django_db
class TestTrackingByNumber:
    """운송장 번호 조회 (공개)"""

    def test_public_lookup_hides_internal_events(self, api_client):
        # Arrange
        tracking = ShippingTrackingFactory(tracking_number="TRK202501010077")
        TrackingEventFactory(tracking=tracking, description="접수")
        TrackingEventFactory(tracking=tracking, description="내부 메모", is_customer_visible=False)

        # Act
        response = api_client.get(
            reverse("shipping-tracking-by-number", kwargs={"tracking_number": "trk202501010077"})
        )

        # Assert
        assert response.status_code == status.HTTP_200_OK
        data = response.data["data"]
        assert data["tracking_number"] == "TRK202501010077"
        assert [event["description"] for event in data["events"]] == ["접수"]
        assert "delivery_address" not in data

    def test_unknown_number(self, api_client):
        response = api_client.get(reverse("shipping-tracking-by-number", kwargs={"tracking_number": "NOPE"}))

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.data["success"] is False
