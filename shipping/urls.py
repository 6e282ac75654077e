from django.urls import include, path

from rest_framework.routers import DefaultRouter

from shipping.views.checkout_views import CheckoutShippingView, PublicShippingMethodsView, ShippingQuoteView
from shipping.views.method_views import ShippingMethodViewSet
from shipping.views.region_views import RegionViewSet
from shipping.views.tracking_views import ShippingTrackingViewSet
from shipping.views.zone_views import ShippingZoneViewSet

# DRF의 라우터 생성
router = DefaultRouter()

# ViewSet 등록
router.register(r"zones", ShippingZoneViewSet, basename="shipping-zone")
router.register(r"methods", ShippingMethodViewSet, basename="shipping-method")
router.register(r"regions", RegionViewSet, basename="region")
router.register(r"trackings", ShippingTrackingViewSet, basename="shipping-tracking")

# URL 패턴 정의
urlpatterns = [
    # API root - 라우터가 자동으로 생성하는 URL들
    path("", include(router.urls)),
    # 배송비 계산
    path("calculate-checkout/", CheckoutShippingView.as_view(), name="shipping-calculate-checkout"),
    path("quote/", ShippingQuoteView.as_view(), name="shipping-quote"),
    path("public-methods/", PublicShippingMethodsView.as_view(), name="shipping-public-methods"),
]
