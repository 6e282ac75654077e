"""
체크아웃 배송비 계산 서비스

주소 → 배송 구역 → 장바구니 무게/카테고리 집계 → 배송 방법별 계산 → 정렬

- calculate_checkout_shipping: 체크아웃 화면의 이용 가능한 배송 방법 목록
- quote_method: 선택한 배송 방법 하나의 배송비 재계산 (주문 생성 경로 공통)
- public_methods: 주소(주/LGA) 기준 구역과 배송 방법 요약 (비로그인 조회용)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from django.conf import settings
from django.db import DatabaseError
from django.utils import timezone

from shipping.models import Address, Product, ShippingMethod, ShippingZone
from shipping.models.method_config import PICKUP, MethodConfigError, format_weight

from . import rate_engine
from .base import log_service_call
from .exceptions import NotFoundError, ShippingValidationError
from .zone_service import ZoneService

logger = logging.getLogger(__name__)


# ===== 입력 / 결과 객체 =====


@dataclass
class CartItem:
    """장바구니 항목 (상품 ID, 수량)"""

    product_id: int
    quantity: int = 1

    @classmethod
    def from_dict(cls, data: dict) -> CartItem:
        if not isinstance(data, dict):
            raise ShippingValidationError("장바구니 항목 형식이 잘못되었습니다.", details={"field": "items", "item": data})
        product_id = data.get("product_id", data.get("product"))
        try:
            product_id = int(product_id)
            quantity = int(data.get("quantity", 1))
        except (TypeError, ValueError):
            raise ShippingValidationError("장바구니 항목 형식이 잘못되었습니다.", details={"field": "items", "item": data})
        if quantity < 1:
            raise ShippingValidationError(
                "수량은 1 이상이어야 합니다.",
                details={"field": "quantity", "product_id": product_id},
            )
        return cls(product_id=product_id, quantity=quantity)


@dataclass
class ZoneSummary:
    id: int
    name: str
    code: str

    @classmethod
    def from_zone(cls, zone: ShippingZone | None) -> Optional[ZoneSummary]:
        if zone is None:
            return None
        return cls(id=zone.pk, name=zone.name, code=zone.code)


@dataclass
class AddressSummary:
    id: int
    state: str
    sub_region: str
    city: str


@dataclass
class AvailableMethod:
    """이용 가능한 배송 방법 (계산 결과 포함)"""

    id: int
    name: str
    code: str
    type: str
    description: str
    cost: Decimal
    reason: str
    estimated_delivery: dict
    estimated_delivery_date: date
    pickup_locations: list[dict] = field(default_factory=list)

    @property
    def is_free(self) -> bool:
        return self.cost == 0


@dataclass
class CheckoutShippingResult:
    zone: Optional[ZoneSummary]
    methods: list[AvailableMethod]
    calculated_weight: Decimal
    address: AddressSummary
    product_categories: int
    applicable_products: int


@dataclass
class MethodQuote:
    """선택한 배송 방법의 확정 배송비"""

    method: ShippingMethod
    zone: Optional[ZoneSummary]
    cost: Decimal
    reason: str
    weight: Decimal
    estimated_delivery_date: date
    pickup_location: Optional[dict] = None


@dataclass
class _CartSummary:
    products: list[Product]
    weight: Decimal
    product_ids: set[int]
    category_ids: set[int]


class CheckoutShippingService:
    """체크아웃 배송비 계산 서비스"""

    # ===== 공개 API =====

    @staticmethod
    @log_service_call
    def calculate_checkout_shipping(
        address_id: int,
        items: list[dict],
        order_value: Any,
        total_weight: Any = None,
    ) -> CheckoutShippingResult:
        """
        체크아웃 배송 방법 목록 계산

        Args:
            address_id: 배송지 ID
            items: [{"product_id", "quantity"}]
            order_value: 주문 금액 (무료배송 조건 판단)
            total_weight: 총 무게 (생략 시 상품 무게 합계)

        Returns:
            CheckoutShippingResult: 무료 배송 우선, 배송비 오름차순으로 정렬된 목록
            (이용 가능한 방법이 없으면 빈 목록)

        Raises:
            NotFoundError: 주소 없음
            ShippingValidationError: 유효한 상품 없음, 잘못된 금액/무게
        """
        address = CheckoutShippingService._load_address(address_id)
        zone = CheckoutShippingService.resolve_address_zone(address)
        cart = CheckoutShippingService._summarize_cart(items, total_weight)
        order_value = CheckoutShippingService._to_amount(order_value, "order_value")
        zone_id = zone.pk if zone else None

        now = timezone.now()
        today = timezone.localdate()
        available: list[AvailableMethod] = []

        for method in ShippingMethod.objects.filter(is_active=True).order_by("sort_order", "created_at", "id"):
            try:
                calculation = CheckoutShippingService._evaluate(method, zone_id, cart, order_value, now)
                if calculation is None:
                    continue
                available.append(CheckoutShippingService._to_available_method(method, calculation, zone_id, today))
            except Exception:
                # 해당 배송 방법만 제외
                logger.warning(
                    "[Checkout] 배송 방법 계산 실패, 건너뜀 | method_id=%d, code=%s",
                    method.pk,
                    method.code,
                    exc_info=True,
                )

        methods = rate_engine.sort_by_cost(available)
        logger.info(
            "[Checkout] 배송비 계산 | address_id=%d, zone=%s, weight=%s, methods=%d",
            address.pk,
            zone.code if zone else None,
            format_weight(cart.weight),
            len(methods),
        )

        return CheckoutShippingResult(
            zone=ZoneSummary.from_zone(zone),
            methods=methods,
            calculated_weight=cart.weight,
            address=AddressSummary(
                id=address.pk,
                state=address.state,
                sub_region=address.sub_region,
                city=address.city,
            ),
            product_categories=len(cart.category_ids),
            applicable_products=len(cart.products),
        )

    @staticmethod
    @log_service_call
    def quote_method(
        address_id: int,
        items: list[dict],
        order_value: Any,
        method_id: int,
        pickup_location_index: int | None = None,
        total_weight: Any = None,
    ) -> MethodQuote:
        """
        선택한 배송 방법 하나의 배송비 재계산

        체크아웃 목록과 같은 규칙(구역 매칭, 무게, 유효 기간, 적용 대상, 배송비)을
        사용하므로 주문을 만드는 모든 경로에서 같은 금액이 나옵니다.

        Raises:
            NotFoundError: 주소 없음, 비활성/없는 배송 방법
            ShippingValidationError: 유효 기간 밖, 적용 대상 아님, 이용 불가,
                                     잘못된 픽업 장소 번호
        """
        address = CheckoutShippingService._load_address(address_id)
        try:
            method = ShippingMethod.objects.get(pk=method_id, is_active=True)
        except (ShippingMethod.DoesNotExist, ValueError, TypeError):
            raise NotFoundError("배송 방법을 찾을 수 없습니다.", details={"method_id": method_id})

        zone = CheckoutShippingService.resolve_address_zone(address)
        zone_id = zone.pk if zone else None
        cart = CheckoutShippingService._summarize_cart(items, total_weight)
        order_value = CheckoutShippingService._to_amount(order_value, "order_value")

        if not rate_engine.is_currently_valid(method):
            raise ShippingValidationError(
                "현재 이용할 수 없는 배송 방법입니다.",
                details={"method_id": method.pk, "reason": "Method is not currently valid"},
            )
        if not rate_engine.applies_to_items(method, cart.product_ids, cart.category_ids):
            raise ShippingValidationError(
                "장바구니 상품에 적용되지 않는 배송 방법입니다.",
                details={"method_id": method.pk, "reason": "Method does not apply to these products"},
            )
        if not rate_engine.is_available_in_zone(method, zone_id):
            raise ShippingValidationError(
                "배송지 구역에서 이용할 수 없는 배송 방법입니다.",
                details={"method_id": method.pk, "reason": "Method not available for this zone"},
            )

        calculation = rate_engine.calculate_shipping_cost(method, cart.weight, order_value, zone_id)
        if not calculation.eligible:
            raise ShippingValidationError(
                f"이용할 수 없는 배송 방법입니다: {calculation.reason}",
                details={"method_id": method.pk, "reason": calculation.reason},
            )

        pickup_location = None
        if method.type == PICKUP and pickup_location_index is not None:
            locations = rate_engine.pickup_locations_for_zone(method, zone_id)
            if not 0 <= pickup_location_index < len(locations):
                raise ShippingValidationError(
                    "픽업 장소 번호가 범위를 벗어났습니다.",
                    details={"field": "pickup_location_index", "available": len(locations)},
                )
            pickup_location = locations[pickup_location_index].to_dict()

        logger.info(
            "[Checkout] 배송비 확정 | address_id=%d, method=%s, zone=%s, cost=%s",
            address.pk,
            method.code,
            zone.code if zone else None,
            calculation.cost,
        )
        return MethodQuote(
            method=method,
            zone=ZoneSummary.from_zone(zone),
            cost=calculation.cost,
            reason=calculation.reason,
            weight=cart.weight,
            estimated_delivery_date=rate_engine.estimated_delivery_date(method),
            pickup_location=pickup_location,
        )

    @staticmethod
    def public_methods(state: str, sub_region: str | None = None, city: str | None = None) -> dict:
        """
        주소 기준 배송 구역과 이용 가능한 배송 방법 요약

        배송비는 장바구니에 따라 달라지므로 계산하지 않습니다.
        """
        zone = ZoneService.resolve_zone(state, sub_region, city)
        zone_id = zone.pk if zone else None
        now = timezone.now()

        methods = []
        for method in ShippingMethod.objects.filter(is_active=True).order_by("sort_order", "created_at", "id"):
            try:
                if not rate_engine.is_currently_valid(method, now):
                    continue
                if not rate_engine.is_available_in_zone(method, zone_id):
                    continue
            except MethodConfigError:
                logger.warning("[Checkout] 배송 방법 설정 오류, 건너뜀 | method_id=%d", method.pk, exc_info=True)
                continue
            methods.append(
                {
                    "id": method.pk,
                    "name": method.name,
                    "code": method.code,
                    "type": method.type,
                    "description": method.description,
                    "estimated_delivery": method.estimated_delivery,
                }
            )

        return {"zone": ZoneSummary.from_zone(zone), "methods": methods}

    # ===== 구역 =====

    @staticmethod
    def resolve_address_zone(address: Address) -> ShippingZone | None:
        """
        주소의 배송 구역

        메모이제이션된 구역이 활성 상태면 그대로 사용하고,
        아니면 다시 매칭한 뒤 주소에 저장합니다. (저장 실패는 로그만 남김)
        """
        memoized = address.shipping_zone
        if memoized is not None and memoized.is_active:
            return memoized

        zone = ZoneService.resolve_zone(address.state, address.sub_region, address.city)
        zone_id = zone.pk if zone else None
        if address.shipping_zone_id != zone_id:
            try:
                Address.objects.filter(pk=address.pk).update(shipping_zone=zone)
                address.shipping_zone = zone
            except DatabaseError:
                logger.warning(
                    "[Checkout] 주소 배송 구역 저장 실패 | address_id=%d, zone_id=%s",
                    address.pk,
                    zone_id,
                    exc_info=True,
                )
        return zone

    # ===== 내부 헬퍼 =====

    @staticmethod
    def _load_address(address_id: int) -> Address:
        try:
            return Address.objects.select_related("shipping_zone").get(pk=address_id)
        except (Address.DoesNotExist, ValueError, TypeError):
            raise NotFoundError("배송지를 찾을 수 없습니다.", details={"address_id": address_id})

    @staticmethod
    def _summarize_cart(items: list[dict], total_weight: Any) -> _CartSummary:
        """유효 상품(공개 + 판매 가능) 기준 무게/상품/카테고리 집계"""
        cart_items = [CartItem.from_dict(item) for item in items or ()]
        if not cart_items:
            raise ShippingValidationError("장바구니 항목이 필요합니다.", details={"field": "items"})

        products = {
            product.pk: product
            for product in Product.objects.filter(
                pk__in=[item.product_id for item in cart_items],
                is_published=True,
                is_available=True,
            )
        }
        valid_items = [item for item in cart_items if item.product_id in products]
        if not valid_items:
            raise ShippingValidationError(
                "배송비를 계산할 수 있는 상품이 없습니다.",
                details={"field": "items", "product_ids": [item.product_id for item in cart_items]},
            )

        if total_weight not in (None, ""):
            weight = CheckoutShippingService._to_amount(total_weight, "total_weight")
        else:
            default_weight = Decimal(str(settings.SHIPPING["DEFAULT_ITEM_WEIGHT_KG"]))
            weight = sum(
                (
                    (products[item.product_id].weight if products[item.product_id].weight is not None else default_weight)
                    * item.quantity
                    for item in valid_items
                ),
                Decimal("0"),
            )

        return _CartSummary(
            products=[products[item.product_id] for item in valid_items],
            weight=weight,
            product_ids={item.product_id for item in valid_items},
            category_ids={
                products[item.product_id].category_id
                for item in valid_items
                if products[item.product_id].category_id is not None
            },
        )

    @staticmethod
    def _to_amount(value: Any, field_name: str) -> Decimal:
        try:
            amount = Decimal(str(value))
        except (InvalidOperation, ValueError, TypeError):
            raise ShippingValidationError(f"{field_name} 값이 숫자가 아닙니다.", details={"field": field_name})
        if not amount.is_finite() or amount < 0:
            raise ShippingValidationError(f"{field_name} 값은 0 이상이어야 합니다.", details={"field": field_name})
        return amount

    @staticmethod
    def _evaluate(
        method: ShippingMethod,
        zone_id: int | None,
        cart: _CartSummary,
        order_value: Decimal,
        now: datetime,
    ) -> rate_engine.ShippingCalculation | None:
        """유효 기간 → 적용 대상 → 구역 → 배송비 순서로 확인 (이용 불가면 None)"""
        if not rate_engine.is_currently_valid(method, now):
            logger.debug("[Checkout] 유효 기간 아님 | method=%s", method.code)
            return None
        if not rate_engine.applies_to_items(method, cart.product_ids, cart.category_ids):
            logger.debug("[Checkout] 적용 대상 아님 | method=%s", method.code)
            return None
        if not rate_engine.is_available_in_zone(method, zone_id):
            logger.debug("[Checkout] 구역 이용 불가 | method=%s, zone_id=%s", method.code, zone_id)
            return None

        calculation = rate_engine.calculate_shipping_cost(method, cart.weight, order_value, zone_id)
        if not calculation.eligible:
            logger.debug("[Checkout] 이용 불가 | method=%s, reason=%s", method.code, calculation.reason)
            return None
        return calculation

    @staticmethod
    def _to_available_method(
        method: ShippingMethod,
        calculation: rate_engine.ShippingCalculation,
        zone_id: int | None,
        today: date,
    ) -> AvailableMethod:
        pickup_locations = []
        if method.type == PICKUP:
            pickup_locations = [location.to_dict() for location in rate_engine.pickup_locations_for_zone(method, zone_id)]

        return AvailableMethod(
            id=method.pk,
            name=method.name,
            code=method.code,
            type=method.type,
            description=method.description,
            cost=calculation.cost,
            reason=calculation.reason,
            estimated_delivery=method.estimated_delivery,
            estimated_delivery_date=rate_engine.estimated_delivery_date(method, today),
            pickup_locations=pickup_locations,
        )
