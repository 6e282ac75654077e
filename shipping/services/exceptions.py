"""
배송 서비스 예외

| 예외                   | code                 | HTTP |
|------------------------|----------------------|------|
| ShippingValidationError | VALIDATION_ERROR    | 400  |
| InvalidStateError       | INVALID_STATE       | 400  |
| InvalidSubRegionError   | INVALID_SUB_REGION  | 400  |
| NotFoundError           | NOT_FOUND           | 404  |
| DependencyError         | DEPENDENCY_ERROR    | 400  |
| ConflictError           | CONFLICT            | 400  |
| MethodConfigError       | INVALID_METHOD_CONFIG | 400 |
"""

from __future__ import annotations

from shipping.models.method_config import MethodConfigError

from .base import ServiceError


class ShippingValidationError(ServiceError):
    """필수 값 누락, 잘못된 설정, 비어 있는 필수 목록"""

    def __init__(self, message: str, code: str = "VALIDATION_ERROR", details: dict | None = None):
        super().__init__(message, code=code, details=details)


class InvalidStateError(ShippingValidationError):
    """참조 데이터에 없는 주(state)"""

    def __init__(self, state: str):
        super().__init__(
            f"유효하지 않은 주(state)입니다: {state}",
            code="INVALID_STATE",
            details={"state": state},
        )


class InvalidSubRegionError(ShippingValidationError):
    """해당 주에 존재하지 않는 LGA"""

    def __init__(self, state: str, invalid: list[str]):
        super().__init__(
            f"{state}에 존재하지 않는 LGA가 포함되어 있습니다: {', '.join(invalid)}",
            code="INVALID_SUB_REGION",
            details={"state": state, "invalid": list(invalid)},
        )


class NotFoundError(ServiceError):
    """구역/배송 방법/주소/상품 없음"""

    def __init__(self, message: str, code: str = "NOT_FOUND", details: dict | None = None):
        super().__init__(message, code=code, details=details)


class DependencyError(ServiceError):
    """참조 중인 데이터가 있어 삭제 불가"""

    def __init__(self, message: str, code: str = "DEPENDENCY_ERROR", details: dict | None = None):
        super().__init__(message, code=code, details=details)


class ConflictError(ServiceError):
    """이름/코드 중복"""

    def __init__(self, message: str, code: str = "CONFLICT", details: dict | None = None):
        super().__init__(message, code=code, details=details)


__all__ = [
    "ConflictError",
    "DependencyError",
    "InvalidStateError",
    "InvalidSubRegionError",
    "MethodConfigError",
    "NotFoundError",
    "ServiceError",
    "ShippingValidationError",
]
