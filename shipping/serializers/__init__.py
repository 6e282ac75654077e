"""
shipping/serializers/__init__.py

Serializer 모듈의 진입점입니다.

사용 예시:
    from shipping.serializers import ShippingZoneDetailSerializer, ShippingMethodSerializer
"""

# Checkout 관련 Serializers
from .checkout_serializers import (
    AvailableMethodSerializer,
    CheckoutShippingRequestSerializer,
    CheckoutShippingResultSerializer,
    MethodQuoteSerializer,
    PublicMethodsQuerySerializer,
    PublicMethodsResultSerializer,
    ShippingQuoteRequestSerializer,
)

# Method 관련 Serializers
from .method_serializers import (
    ShippingMethodListSerializer,
    ShippingMethodSerializer,
    ShippingMethodWriteSerializer,
)

# Region 관련 Serializers
from .region_serializers import RegionDetailSerializer, RegionSerializer

# Tracking 관련 Serializers
from .tracking_serializers import (
    PublicTrackingSerializer,
    ShippingTrackingSerializer,
    TrackingCreateSerializer,
    TrackingEventCreateSerializer,
    TrackingEventSerializer,
)

# Zone 관련 Serializers
from .zone_serializers import (
    ShippingZoneDetailSerializer,
    ShippingZoneListSerializer,
    ShippingZoneStateSerializer,
    ShippingZoneWriteSerializer,
    ZoneResolveQuerySerializer,
)

__all__ = [
    # Checkout
    "AvailableMethodSerializer",
    "CheckoutShippingRequestSerializer",
    "CheckoutShippingResultSerializer",
    "MethodQuoteSerializer",
    "PublicMethodsQuerySerializer",
    "PublicMethodsResultSerializer",
    "ShippingQuoteRequestSerializer",
    # Method
    "ShippingMethodListSerializer",
    "ShippingMethodSerializer",
    "ShippingMethodWriteSerializer",
    # Region
    "RegionDetailSerializer",
    "RegionSerializer",
    # Tracking
    "PublicTrackingSerializer",
    "ShippingTrackingSerializer",
    "TrackingCreateSerializer",
    "TrackingEventCreateSerializer",
    "TrackingEventSerializer",
    # Zone
    "ShippingZoneDetailSerializer",
    "ShippingZoneListSerializer",
    "ShippingZoneStateSerializer",
    "ShippingZoneWriteSerializer",
    "ZoneResolveQuerySerializer",
]
