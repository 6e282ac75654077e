"""
배송 방법 설정 (타입별 태그드 유니온)

ShippingMethod.config JSON 문서는 배송 방법 타입에 해당하는 설정만 저장합니다.
이 모듈은 저장된 문서를 타입별 불변 dataclass로 변환합니다.

- flat_rate      → FlatRateConfig
- table_shipping → TableShippingConfig
- pickup         → PickupConfig

다른 타입의 설정 블록은 저장 형식상 존재할 수 없으므로,
"타입과 맞지 않는 설정이 남아 있는" 상태를 표현할 수 없습니다.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, time
from decimal import Decimal, InvalidOperation
from typing import Any, ClassVar, Union

from django.utils import timezone
from django.utils.dateparse import parse_date, parse_datetime

# ===== 타입 / 적용 대상 상수 =====

FLAT_RATE = "flat_rate"
TABLE_SHIPPING = "table_shipping"
PICKUP = "pickup"

METHOD_TYPE_CHOICES = [
    (FLAT_RATE, "고정 배송비"),
    (TABLE_SHIPPING, "무게 구간별 배송비"),
    (PICKUP, "매장 픽업"),
]
METHOD_TYPES = tuple(choice[0] for choice in METHOD_TYPE_CHOICES)

# 배송 방법 코드 접두사
TYPE_CODE_PREFIX = {
    FLAT_RATE: "FR",
    TABLE_SHIPPING: "TS",
    PICKUP: "PU",
}

ASSIGN_ALL_PRODUCTS = "all_products"
ASSIGN_CATEGORIES = "categories"
ASSIGN_SPECIFIC_PRODUCTS = "specific_products"

ASSIGNMENT_CHOICES = [
    (ASSIGN_ALL_PRODUCTS, "전체 상품"),
    (ASSIGN_CATEGORIES, "특정 카테고리"),
    (ASSIGN_SPECIFIC_PRODUCTS, "특정 상품"),
]
ASSIGNMENTS = tuple(choice[0] for choice in ASSIGNMENT_CHOICES)

# 픽업 장소 필수 항목
PICKUP_LOCATION_REQUIRED_FIELDS = ("name", "address", "city", "state", "sub_region")

TWO_PLACES = Decimal("0.01")


class MethodConfigError(ValueError):
    """
    배송 방법 설정 문서가 타입과 맞지 않거나 형식이 잘못된 경우

    서비스 예외와 같은 속성(message, code, details)을 가집니다.
    """

    def __init__(self, message: str, code: str = "INVALID_METHOD_CONFIG", details: dict | None = None):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"


# ===== 값 변환 헬퍼 =====


def to_decimal(value: Any, field_name: str) -> Decimal:
    """숫자/문자열을 Decimal로 변환 (음수 불가)"""
    if isinstance(value, bool) or value is None or value == "":
        raise MethodConfigError(f"{field_name} 값이 필요합니다.", details={"field": field_name})
    try:
        result = Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise MethodConfigError(f"{field_name} 값이 숫자가 아닙니다: {value!r}", details={"field": field_name})
    if not result.is_finite() or result < 0:
        raise MethodConfigError(f"{field_name} 값은 0 이상이어야 합니다.", details={"field": field_name})
    return result


def to_zone_id(value: Any) -> int | None:
    """구역 참조(정수, 숫자 문자열, {"id": ...})를 구역 ID로 변환"""
    if isinstance(value, dict):
        value = value.get("id")
    if value is None or value == "" or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        raise MethodConfigError(f"잘못된 구역 참조입니다: {value!r}", details={"field": "zone"})


def to_datetime(value: Any, field_name: str, end_of_day: bool = False) -> datetime | None:
    """ISO 날짜/일시 문자열을 timezone-aware datetime으로 변환"""
    if value in (None, ""):
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime.combine(value, time.max if end_of_day else time.min)
    else:
        # 날짜만 있는 값은 먼저 확인 (parse_datetime은 자정으로 해석)
        try:
            parsed_date = parse_date(str(value))
            parsed = None if parsed_date else parse_datetime(str(value))
        except ValueError:
            parsed_date, parsed = None, None
        if parsed_date is not None:
            parsed = datetime.combine(parsed_date, time.max if end_of_day else time.min)
        elif parsed is None:
            raise MethodConfigError(f"{field_name} 날짜 형식이 잘못되었습니다: {value!r}", details={"field": field_name})
    if timezone.is_naive(parsed):
        parsed = timezone.make_aware(parsed)
    return parsed


def format_decimal(value: Decimal | None) -> str | None:
    """저장/응답용 소수 2자리 문자열"""
    if value is None:
        return None
    return str(value.quantize(TWO_PLACES))


def format_weight(value: Decimal) -> str:
    """무게 표시 (불필요한 0 제거, 예: 25.000 → 25)"""
    text = f"{Decimal(value).normalize():f}"
    return text


# ===== 공통 구성 요소 =====


@dataclass(frozen=True)
class AssignmentFilter:
    """
    상품/카테고리 적용 대상

    applies_to_all은 "전체 적용" 상태를 명시적으로 표현합니다.
    - all_products 모드
    - categories 모드인데 카테고리 목록이 비어 있음
    - specific_products 모드인데 상품 목록이 비어 있음
    """

    mode: str = ASSIGN_ALL_PRODUCTS
    categories: tuple[int, ...] = ()
    products: tuple[int, ...] = ()

    @property
    def targets(self) -> tuple[int, ...]:
        if self.mode == ASSIGN_CATEGORIES:
            return self.categories
        if self.mode == ASSIGN_SPECIFIC_PRODUCTS:
            return self.products
        return ()

    @property
    def applies_to_all(self) -> bool:
        return self.mode == ASSIGN_ALL_PRODUCTS or not self.targets

    @classmethod
    def from_dict(cls, data: dict) -> AssignmentFilter:
        mode = data.get("assignment") or ASSIGN_ALL_PRODUCTS
        if mode not in ASSIGNMENTS:
            raise MethodConfigError(f"알 수 없는 적용 대상입니다: {mode!r}", details={"field": "assignment"})
        try:
            categories = tuple(int(c) for c in data.get("categories") or ())
            products = tuple(int(p) for p in data.get("products") or ())
        except (TypeError, ValueError):
            raise MethodConfigError("카테고리/상품 ID는 정수여야 합니다.", details={"field": "assignment"})
        return cls(mode=mode, categories=categories, products=products)

    def to_dict(self) -> dict:
        return {
            "assignment": self.mode,
            "categories": list(self.categories),
            "products": list(self.products),
        }


@dataclass(frozen=True)
class FreeShipping:
    """무료배송 조건 (주문 금액 기준, 경계값 포함)"""

    enabled: bool = False
    minimum_order_amount: Decimal = Decimal("0")

    def is_met(self, order_value: Decimal) -> bool:
        return self.enabled and order_value >= self.minimum_order_amount

    @classmethod
    def from_dict(cls, data: dict | None) -> FreeShipping:
        if not data:
            return cls()
        enabled = bool(data.get("enabled", False))
        minimum = data.get("minimum_order_amount")
        if minimum in (None, ""):
            minimum = 0
        return cls(enabled=enabled, minimum_order_amount=to_decimal(minimum, "minimum_order_amount"))

    def to_dict(self) -> dict:
        return {
            "enabled": self.enabled,
            "minimum_order_amount": format_decimal(self.minimum_order_amount),
        }


@dataclass(frozen=True)
class PickupLocation:
    """픽업 장소"""

    name: str
    address: str
    city: str
    state: str
    sub_region: str
    postal_code: str = ""
    phone: str = ""
    operating_hours: dict = field(default_factory=dict, hash=False, compare=False)
    is_active: bool = True

    @staticmethod
    def is_complete(data: dict) -> bool:
        """필수 항목(name/address/city/state/sub_region)이 모두 채워졌는지"""
        return all(str(data.get(key) or "").strip() for key in PICKUP_LOCATION_REQUIRED_FIELDS)

    @classmethod
    def from_dict(cls, data: dict) -> PickupLocation:
        if not isinstance(data, dict) or not cls.is_complete(data):
            raise MethodConfigError("픽업 장소 필수 항목이 누락되었습니다.", details={"field": "locations"})
        return cls(
            name=str(data["name"]).strip(),
            address=str(data["address"]).strip(),
            city=str(data["city"]).strip(),
            state=str(data["state"]).strip(),
            sub_region=str(data["sub_region"]).strip(),
            postal_code=str(data.get("postal_code") or "").strip(),
            phone=str(data.get("phone") or "").strip(),
            operating_hours=dict(data.get("operating_hours") or {}),
            is_active=bool(data.get("is_active", True)),
        )

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "address": self.address,
            "city": self.city,
            "state": self.state,
            "sub_region": self.sub_region,
            "postal_code": self.postal_code,
            "phone": self.phone,
            "operating_hours": dict(self.operating_hours),
            "is_active": self.is_active,
        }


@dataclass(frozen=True)
class _ValidityWindow:
    """유효 기간 (설정되지 않으면 항상 유효)"""

    valid_from: datetime | None = None
    valid_until: datetime | None = None

    def is_valid_at(self, now: datetime) -> bool:
        if self.valid_from is not None and self.valid_from > now:
            return False
        if self.valid_until is not None and self.valid_until < now:
            return False
        return True


def _validity_from_dict(data: dict) -> dict:
    return {
        "valid_from": to_datetime(data.get("valid_from"), "valid_from"),
        "valid_until": to_datetime(data.get("valid_until"), "valid_until", end_of_day=True),
    }


def _validity_to_dict(config: Any) -> dict:
    return {
        "valid_from": config.valid_from.isoformat() if config.valid_from else None,
        "valid_until": config.valid_until.isoformat() if config.valid_until else None,
    }


# ===== 고정 배송비 (flat_rate) =====


@dataclass(frozen=True)
class FlatZoneRate:
    """구역별 고정 배송비 (구역 단위 무료배송 조건 선택)"""

    zone: int
    cost: Decimal
    free_shipping: FreeShipping | None = None


@dataclass(frozen=True)
class FlatRateConfig:
    default_cost: Decimal | None = None
    zone_rates: tuple[FlatZoneRate, ...] = ()
    free_shipping: FreeShipping = FreeShipping()
    assignment: AssignmentFilter = AssignmentFilter()
    valid_from: datetime | None = None
    valid_until: datetime | None = None

    type: ClassVar[str] = FLAT_RATE

    def rate_for_zone(self, zone_id: int | None) -> FlatZoneRate | None:
        if zone_id is None:
            return None
        for rate in self.zone_rates:
            if rate.zone == zone_id:
                return rate
        return None

    @property
    def zone_ids(self) -> set[int]:
        return {rate.zone for rate in self.zone_rates}

    def is_valid_at(self, now: datetime) -> bool:
        return _ValidityWindow(self.valid_from, self.valid_until).is_valid_at(now)

    @classmethod
    def from_dict(cls, data: dict) -> FlatRateConfig:
        zone_rates = []
        for entry in data.get("zone_rates") or ():
            zone = to_zone_id(entry.get("zone"))
            if zone is None:
                raise MethodConfigError("구역별 배송비에 구역이 지정되지 않았습니다.", details={"field": "zone_rates"})
            override = entry.get("free_shipping")
            zone_rates.append(
                FlatZoneRate(
                    zone=zone,
                    cost=to_decimal(entry.get("cost"), "zone_rates.cost"),
                    free_shipping=FreeShipping.from_dict(override) if override else None,
                )
            )
        default_cost = data.get("default_cost")
        return cls(
            default_cost=None if default_cost in (None, "") else to_decimal(default_cost, "default_cost"),
            zone_rates=tuple(zone_rates),
            free_shipping=FreeShipping.from_dict(data.get("free_shipping")),
            assignment=AssignmentFilter.from_dict(data),
            **_validity_from_dict(data),
        )

    def to_dict(self) -> dict:
        return {
            "default_cost": format_decimal(self.default_cost),
            "zone_rates": [
                {
                    "zone": rate.zone,
                    "cost": format_decimal(rate.cost),
                    "free_shipping": rate.free_shipping.to_dict() if rate.free_shipping else None,
                }
                for rate in self.zone_rates
            ],
            "free_shipping": self.free_shipping.to_dict(),
            **self.assignment.to_dict(),
            **_validity_to_dict(self),
        }


# ===== 무게 구간별 배송비 (table_shipping) =====


@dataclass(frozen=True)
class WeightRange:
    """무게 구간 (양 끝 포함)"""

    min_weight: Decimal
    max_weight: Decimal
    cost: Decimal

    def contains(self, weight: Decimal) -> bool:
        return self.min_weight <= weight <= self.max_weight


@dataclass(frozen=True)
class TableZoneRate:
    zone: int
    weight_ranges: tuple[WeightRange, ...]

    def find_range(self, weight: Decimal) -> WeightRange | None:
        """설정된 순서대로 첫 번째로 일치하는 구간"""
        for weight_range in self.weight_ranges:
            if weight_range.contains(weight):
                return weight_range
        return None


@dataclass(frozen=True)
class TableShippingConfig:
    zone_rates: tuple[TableZoneRate, ...] = ()
    assignment: AssignmentFilter = AssignmentFilter()
    valid_from: datetime | None = None
    valid_until: datetime | None = None

    type: ClassVar[str] = TABLE_SHIPPING

    def rate_for_zone(self, zone_id: int | None) -> TableZoneRate | None:
        if zone_id is None:
            return None
        for rate in self.zone_rates:
            if rate.zone == zone_id:
                return rate
        return None

    @property
    def zone_ids(self) -> set[int]:
        return {rate.zone for rate in self.zone_rates}

    def is_valid_at(self, now: datetime) -> bool:
        return _ValidityWindow(self.valid_from, self.valid_until).is_valid_at(now)

    @classmethod
    def from_dict(cls, data: dict) -> TableShippingConfig:
        zone_rates = []
        for entry in data.get("zone_rates") or ():
            zone = to_zone_id(entry.get("zone"))
            if zone is None:
                raise MethodConfigError("구역별 배송비에 구역이 지정되지 않았습니다.", details={"field": "zone_rates"})
            ranges = []
            for item in entry.get("weight_ranges") or ():
                weight_range = WeightRange(
                    min_weight=to_decimal(item.get("min_weight"), "min_weight"),
                    max_weight=to_decimal(item.get("max_weight"), "max_weight"),
                    cost=to_decimal(item.get("cost"), "weight_ranges.cost"),
                )
                if weight_range.min_weight > weight_range.max_weight:
                    raise MethodConfigError(
                        "최소 무게가 최대 무게보다 클 수 없습니다.",
                        details={"field": "weight_ranges", "zone": zone},
                    )
                ranges.append(weight_range)
            zone_rates.append(TableZoneRate(zone=zone, weight_ranges=tuple(ranges)))
        return cls(
            zone_rates=tuple(zone_rates),
            assignment=AssignmentFilter.from_dict(data),
            **_validity_from_dict(data),
        )

    def to_dict(self) -> dict:
        return {
            "zone_rates": [
                {
                    "zone": rate.zone,
                    "weight_ranges": [
                        {
                            "min_weight": str(weight_range.min_weight),
                            "max_weight": str(weight_range.max_weight),
                            "cost": format_decimal(weight_range.cost),
                        }
                        for weight_range in rate.weight_ranges
                    ],
                }
                for rate in self.zone_rates
            ],
            **self.assignment.to_dict(),
            **_validity_to_dict(self),
        }


# ===== 매장 픽업 (pickup) =====


@dataclass(frozen=True)
class ZoneLocations:
    zone: int
    locations: tuple[PickupLocation, ...]


@dataclass(frozen=True)
class PickupConfig:
    zone_locations: tuple[ZoneLocations, ...] = ()
    default_locations: tuple[PickupLocation, ...] = ()
    cost: Decimal = Decimal("0")
    assignment: AssignmentFilter = AssignmentFilter()
    valid_from: datetime | None = None
    valid_until: datetime | None = None

    type: ClassVar[str] = PICKUP

    def entry_for_zone(self, zone_id: int | None) -> ZoneLocations | None:
        if zone_id is None:
            return None
        for entry in self.zone_locations:
            if entry.zone == zone_id:
                return entry
        return None

    @property
    def zone_ids(self) -> set[int]:
        return {entry.zone for entry in self.zone_locations}

    def is_valid_at(self, now: datetime) -> bool:
        return _ValidityWindow(self.valid_from, self.valid_until).is_valid_at(now)

    @classmethod
    def from_dict(cls, data: dict) -> PickupConfig:
        zone_locations = []
        for entry in data.get("zone_locations") or ():
            zone = to_zone_id(entry.get("zone"))
            if zone is None:
                raise MethodConfigError("픽업 장소에 구역이 지정되지 않았습니다.", details={"field": "zone_locations"})
            locations = tuple(PickupLocation.from_dict(item) for item in entry.get("locations") or ())
            zone_locations.append(ZoneLocations(zone=zone, locations=locations))
        cost = data.get("cost")
        return cls(
            zone_locations=tuple(zone_locations),
            default_locations=tuple(PickupLocation.from_dict(item) for item in data.get("default_locations") or ()),
            cost=Decimal("0") if cost in (None, "") else to_decimal(cost, "cost"),
            assignment=AssignmentFilter.from_dict(data),
            **_validity_from_dict(data),
        )

    def to_dict(self) -> dict:
        return {
            "zone_locations": [
                {"zone": entry.zone, "locations": [location.to_dict() for location in entry.locations]}
                for entry in self.zone_locations
            ],
            "default_locations": [location.to_dict() for location in self.default_locations],
            "cost": format_decimal(self.cost),
            **self.assignment.to_dict(),
            **_validity_to_dict(self),
        }


MethodConfig = Union[FlatRateConfig, TableShippingConfig, PickupConfig]

CONFIG_CLASSES: dict[str, type] = {
    FLAT_RATE: FlatRateConfig,
    TABLE_SHIPPING: TableShippingConfig,
    PICKUP: PickupConfig,
}


def parse_method_config(method_type: str, data: dict | None) -> MethodConfig:
    """
    저장된 설정 문서를 배송 방법 타입에 맞는 dataclass로 변환

    Raises:
        MethodConfigError: 알 수 없는 타입이거나 설정 형식이 잘못된 경우
    """
    config_class = CONFIG_CLASSES.get(method_type)
    if config_class is None:
        raise MethodConfigError(f"알 수 없는 배송 방법 타입입니다: {method_type!r}", details={"field": "type"})
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise MethodConfigError("배송 방법 설정은 객체여야 합니다.", details={"field": "config"})
    try:
        return config_class.from_dict(data)
    except (AttributeError, TypeError) as e:
        raise MethodConfigError(f"배송 방법 설정 형식이 잘못되었습니다: {e}", details={"field": "config"})
