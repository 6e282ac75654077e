from .address import Address
from .catalog import Category, Product
from .method import ShippingMethod
from .order import Order
from .tracking import ShippingTracking, TrackingEvent
from .zone import ShippingZone, ShippingZoneState

# import 위해

__all__ = [
    "Address",
    "Category",
    "Product",
    "Order",
    "ShippingZone",
    "ShippingZoneState",
    "ShippingMethod",
    "ShippingTracking",
    "TrackingEvent",
]
