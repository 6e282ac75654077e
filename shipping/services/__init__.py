"""
배송 비즈니스 로직 서비스 패키지

서비스 레이어 패턴:
- 뷰와 모델 사이의 비즈니스 로직 계층
- 트랜잭션 관리, 구역/배송 방법 검증 규칙 처리
- 배송비 계산은 DB 접근 없는 rate_engine 함수로 분리
"""

from . import rate_engine
from .base import ServiceError, log_service_call
from .checkout_service import (
    AddressSummary,
    AvailableMethod,
    CheckoutShippingResult,
    CheckoutShippingService,
    MethodQuote,
    ZoneSummary,
)
from .exceptions import (
    ConflictError,
    DependencyError,
    InvalidStateError,
    InvalidSubRegionError,
    MethodConfigError,
    NotFoundError,
    ShippingValidationError,
)
from .method_service import MethodService
from .tracking_service import TrackingService
from .zone_service import ZoneService

__all__ = [
    # Base
    "ServiceError",
    "log_service_call",
    # Exceptions
    "ConflictError",
    "DependencyError",
    "InvalidStateError",
    "InvalidSubRegionError",
    "MethodConfigError",
    "NotFoundError",
    "ShippingValidationError",
    # Services
    "CheckoutShippingService",
    "MethodService",
    "TrackingService",
    "ZoneService",
    "rate_engine",
    # Results
    "AddressSummary",
    "AvailableMethod",
    "CheckoutShippingResult",
    "MethodQuote",
    "ZoneSummary",
]
