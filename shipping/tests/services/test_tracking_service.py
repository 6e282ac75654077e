"""TrackingService 테스트"""

from datetime import date, timedelta

import pytest
from django.utils import timezone

from shipping.models import ShippingTracking
from shipping.services.exceptions import ConflictError, NotFoundError, ShippingValidationError
from shipping.services.tracking_service import TrackingService
from shipping.tests.factories import OrderFactory, ShippingTrackingFactory, TrackingEventFactory


@pytest.mark.django_db
class TestCreateTracking:
    """배송 추적 생성"""

    def test_create_tracking_generates_number(self):
        """운송장 번호 자동 생성 + 접수 이력 + 주문 배송준비중"""
        # Arrange
        order = OrderFactory()
        today = timezone.localdate()

        # Act
        tracking = TrackingService.create_tracking(order.pk, carrier_name="GIG Logistics", carrier_code="GIG")

        # Assert
        order.refresh_from_db()
        assert tracking.tracking_number == f"TRK{today:%Y%m%d}0001"
        assert tracking.status == "pending"
        assert tracking.shipping_method_id == order.shipping_method_id
        assert tracking.delivery_address["state"] == "Lagos"
        assert tracking.events.get().description == "배송이 접수되었습니다."
        assert order.status == "processing"

    def test_custom_tracking_number_uppercased(self):
        order = OrderFactory()

        tracking = TrackingService.create_tracking(order.pk, carrier_name="DHL", tracking_number=" dhl-123 ")

        assert tracking.tracking_number == "DHL-123"

    def test_second_tracking_for_order_rejected(self):
        order = OrderFactory()
        TrackingService.create_tracking(order.pk, carrier_name="GIG Logistics")

        with pytest.raises(ConflictError):
            TrackingService.create_tracking(order.pk, carrier_name="DHL")

    def test_carrier_name_required(self):
        with pytest.raises(ShippingValidationError):
            TrackingService.create_tracking(OrderFactory().pk, carrier_name="  ")

    def test_missing_order(self):
        with pytest.raises(NotFoundError):
            TrackingService.create_tracking(123456, carrier_name="GIG Logistics")

    def test_generate_tracking_number_sequence(self):
        ShippingTrackingFactory(tracking_number="TRK202501150001")

        assert TrackingService.generate_tracking_number(date(2025, 1, 15)) == "TRK202501150002"


@pytest.mark.django_db
class TestAddEvent:
    """배송 상태 이력 추가"""

    def test_in_transit_marks_order_shipped(self):
        tracking = ShippingTrackingFactory()

        TrackingService.add_event(tracking.pk, "in_transit", "Lagos 허브 출발", location={"city": "Ikeja"})

        tracking.refresh_from_db()
        tracking.order.refresh_from_db()
        assert tracking.status == "in_transit"
        assert tracking.order.status == "shipped"

    def test_delivered_sets_actual_delivery(self):
        tracking = ShippingTrackingFactory()

        TrackingService.add_event(tracking.pk, "delivered", "배송 완료")

        tracking.refresh_from_db()
        assert tracking.actual_delivery is not None
        assert tracking.order.status == "delivered"

    def test_status_without_order_mapping_keeps_order_status(self):
        tracking = ShippingTrackingFactory(order__status="shipped")

        TrackingService.add_event(tracking.pk, "out_for_delivery", "배달 출발")

        tracking.order.refresh_from_db()
        assert tracking.order.status == "shipped"

    def test_final_status_rejects_new_events(self):
        tracking = ShippingTrackingFactory(status="delivered")

        with pytest.raises(ShippingValidationError):
            TrackingService.add_event(tracking.pk, "in_transit", "다시 출발")

    def test_unknown_status_rejected(self):
        tracking = ShippingTrackingFactory()

        with pytest.raises(ShippingValidationError):
            TrackingService.add_event(tracking.pk, "teleported", "???")


@pytest.mark.django_db
class TestTrackingQueries:
    def test_lookup_by_number_returns_visible_events_only(self):
        tracking = ShippingTrackingFactory(tracking_number="TRK202501010042")
        TrackingEventFactory(tracking=tracking, description="접수")
        TrackingEventFactory(tracking=tracking, description="내부 메모", is_customer_visible=False)

        found, events = TrackingService.get_by_tracking_number("trk202501010042")

        assert found == tracking
        assert [event.description for event in events] == ["접수"]

    def test_lookup_unknown_number(self):
        with pytest.raises(NotFoundError):
            TrackingService.get_by_tracking_number("NOPE")

    def test_list_overdue_excludes_final_statuses(self):
        today = date(2025, 3, 10)
        late = ShippingTrackingFactory(estimated_delivery=today - timedelta(days=2), status="in_transit")
        ShippingTrackingFactory(estimated_delivery=today - timedelta(days=2), status="delivered")
        ShippingTrackingFactory(estimated_delivery=today + timedelta(days=1), status="in_transit")

        assert list(TrackingService.list_overdue(today)) == [late]

    def test_list_trackings_status_filter(self):
        ShippingTrackingFactory(status="pending")
        in_transit = ShippingTrackingFactory(status="in_transit")

        assert list(TrackingService.list_trackings("in_transit")) == [in_transit]
        assert ShippingTracking.objects.count() == 2
