"""
배송 방법 관리 서비스

- 배송 방법 생성/수정/삭제
- 타입별 설정 정규화 (적용 대상 정리, 구역 없는 항목 제거, 픽업 장소 필터링)
- 배송 방법 코드 자동 생성 ({FR|TS|PU}-{이름 앞 2글자}{01, 02, ...})
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from django.conf import settings
from django.db import transaction
from django.db.models import Q, QuerySet

from shipping.models import Order, ShippingMethod, ShippingZone
from shipping.models.method_config import (
    ASSIGN_ALL_PRODUCTS,
    ASSIGN_CATEGORIES,
    ASSIGN_SPECIFIC_PRODUCTS,
    ASSIGNMENTS,
    FLAT_RATE,
    METHOD_TYPES,
    PICKUP,
    TABLE_SHIPPING,
    TYPE_CODE_PREFIX,
    MethodConfigError,
    PickupLocation,
    parse_method_config,
    to_zone_id,
)

from .base import log_service_call
from .exceptions import ConflictError, DependencyError, NotFoundError, ShippingValidationError

if TYPE_CHECKING:
    from django.contrib.auth.models import AbstractBaseUser

logger = logging.getLogger(__name__)

# 레거시 입력 형식 ({"flat_rate": {...}, "pickup": {...}})의 타입별 키
LEGACY_CONFIG_KEYS = {
    FLAT_RATE: ("flat_rate", "flatRate"),
    TABLE_SHIPPING: ("table_shipping", "tableShipping"),
    PICKUP: ("pickup",),
}


class MethodService:
    """배송 방법 관련 비즈니스 로직 서비스"""

    # ===== 조회 =====

    @staticmethod
    def get_method(method_id: int) -> ShippingMethod:
        try:
            return ShippingMethod.objects.get(pk=method_id)
        except (ShippingMethod.DoesNotExist, ValueError, TypeError):
            raise NotFoundError("배송 방법을 찾을 수 없습니다.", details={"method_id": method_id})

    @staticmethod
    def list_methods(
        search: str | None = None,
        method_type: str | None = None,
        is_active: bool | None = None,
    ) -> QuerySet[ShippingMethod]:
        queryset = ShippingMethod.objects.all()
        if search:
            queryset = queryset.filter(Q(name__icontains=search) | Q(code__icontains=search))
        if method_type:
            queryset = queryset.filter(type=method_type)
        if is_active is not None:
            queryset = queryset.filter(is_active=is_active)
        return queryset

    # ===== 생성 / 수정 / 삭제 =====

    @staticmethod
    @log_service_call
    @transaction.atomic
    def create_method(
        name: str,
        method_type: str,
        config: dict | None = None,
        *,
        description: str = "",
        is_active: bool = True,
        sort_order: int = 0,
        estimated_delivery: dict | None = None,
        code: str | None = None,
        user: AbstractBaseUser | None = None,
    ) -> ShippingMethod:
        """
        배송 방법 생성

        Args:
            name: 배송 방법명
            method_type: flat_rate / table_shipping / pickup
            config: 타입별 설정 (다른 타입의 설정 블록은 무시)
            estimated_delivery: {"min_days", "max_days"} (기본 1~7일)

        Raises:
            ShippingValidationError: 타입/이름/설정 오류
            ConflictError: 코드 중복
        """
        name = (name or "").strip()
        if not name:
            raise ShippingValidationError("배송 방법명은 필수입니다.", details={"field": "name"})
        if method_type not in METHOD_TYPES:
            raise ShippingValidationError(
                f"유효하지 않은 배송 방법 유형입니다: {method_type}",
                details={"field": "type", "allowed": list(METHOD_TYPES)},
            )

        normalized_config = MethodService.normalize_config(method_type, config)
        min_days, max_days = MethodService._delivery_days(estimated_delivery)

        if code:
            code = code.strip().upper()
            if ShippingMethod.objects.filter(code=code).exists():
                raise ConflictError(f"이미 사용 중인 배송 방법 코드입니다: {code}", details={"field": "code"})
        else:
            code = MethodService.generate_code(name, method_type)

        method = ShippingMethod.objects.create(
            name=name,
            code=code,
            description=description or "",
            type=method_type,
            is_active=is_active,
            sort_order=sort_order or 0,
            estimated_min_days=min_days,
            estimated_max_days=max_days,
            config=normalized_config,
            created_by=user,
            updated_by=user,
        )

        logger.info("[Method] 배송 방법 생성 | method_id=%d, code=%s, type=%s", method.pk, method.code, method.type)
        return method

    @staticmethod
    @log_service_call
    @transaction.atomic
    def update_method(method_id: int, *, user: AbstractBaseUser | None = None, **fields: Any) -> ShippingMethod:
        """
        배송 방법 부분 수정

        - type은 변경 불가
        - config가 주어지면 다시 정규화한 뒤 문서 전체를 교체
          (다른 타입의 설정은 저장되지 않음)
        """
        method = MethodService.get_method(method_id)
        update_fields = ["updated_by", "updated_at"]

        new_type = fields.get("type") or fields.get("method_type")
        if new_type and new_type != method.type:
            raise ShippingValidationError(
                "배송 방법 유형은 변경할 수 없습니다.",
                details={"field": "type", "current": method.type, "requested": new_type},
            )

        if "name" in fields:
            name = (fields["name"] or "").strip()
            if not name:
                raise ShippingValidationError("배송 방법명은 필수입니다.", details={"field": "name"})
            method.name = name
            update_fields.append("name")

        if fields.get("code"):
            code = fields["code"].strip().upper()
            if ShippingMethod.objects.filter(code=code).exclude(pk=method.pk).exists():
                raise ConflictError(f"이미 사용 중인 배송 방법 코드입니다: {code}", details={"field": "code"})
            method.code = code
            update_fields.append("code")

        for field_name in ("description", "is_active", "sort_order"):
            if field_name in fields and fields[field_name] is not None:
                setattr(method, field_name, fields[field_name])
                update_fields.append(field_name)

        if fields.get("estimated_delivery") is not None:
            method.estimated_min_days, method.estimated_max_days = MethodService._delivery_days(
                fields["estimated_delivery"]
            )
            update_fields += ["estimated_min_days", "estimated_max_days"]

        if fields.get("config") is not None:
            method.config = MethodService.normalize_config(method.type, fields["config"])
            update_fields.append("config")

        method.updated_by = user
        method.save(update_fields=update_fields)

        logger.info("[Method] 배송 방법 수정 | method_id=%d, fields=%s", method.pk, sorted(fields))
        return method

    @staticmethod
    @log_service_call
    @transaction.atomic
    def delete_method(method_id: int) -> None:
        """
        배송 방법 삭제

        Raises:
            DependencyError: 주문이 참조 중인 경우
        """
        method = MethodService.get_method(method_id)
        order_count = Order.objects.filter(shipping_method=method).count()
        if order_count:
            raise DependencyError(
                f"주문에서 사용 중인 배송 방법은 삭제할 수 없습니다: {method.name}",
                details={"method_id": method.pk, "orders": order_count},
            )

        method_pk = method.pk
        method.delete()
        logger.info("[Method] 배송 방법 삭제 | method_id=%d, code=%s", method_pk, method.code)

    # ===== 설정 정규화 =====

    @staticmethod
    def normalize_config(method_type: str, config: dict | None) -> dict:
        """
        타입별 설정 정규화 후 저장용 문서 반환

        - 레거시 형식이면 타입에 해당하는 블록만 사용
        - assignment 기본값 all_products, 모드와 무관한 목록은 비움
        - flat_rate/table_shipping: 구역 없는 구역별 배송비 제거, 존재하는 구역인지 확인
        - table_shipping: 구역별 배송비와 무게 구간 필수
        - pickup: 필수 항목이 빠진 픽업 장소 제거, 남은 장소가 없으면 거부
        """
        raw = MethodService._extract_type_block(method_type, config or {})
        assignment = raw.get("assignment") or ASSIGN_ALL_PRODUCTS
        if assignment not in ASSIGNMENTS:
            raise ShippingValidationError(
                f"유효하지 않은 적용 대상입니다: {assignment}",
                details={"field": "assignment", "allowed": list(ASSIGNMENTS)},
            )

        data = {
            **raw,
            "assignment": assignment,
            "categories": list(raw.get("categories") or []) if assignment == ASSIGN_CATEGORIES else [],
            "products": list(raw.get("products") or []) if assignment == ASSIGN_SPECIFIC_PRODUCTS else [],
        }

        if method_type in (FLAT_RATE, TABLE_SHIPPING):
            data["zone_rates"] = MethodService._drop_entries_without_zone(raw.get("zone_rates"))
            MethodService._ensure_zones_exist(entry["zone"] for entry in data["zone_rates"])

        if method_type == TABLE_SHIPPING:
            if not data["zone_rates"]:
                raise ShippingValidationError(
                    "무게 구간별 배송은 최소 한 개 이상의 구역별 배송비가 필요합니다.",
                    details={"field": "zone_rates"},
                )
            for entry in data["zone_rates"]:
                if not entry.get("weight_ranges"):
                    raise ShippingValidationError(
                        "구역별 배송비에는 최소 한 개 이상의 무게 구간이 필요합니다.",
                        details={"field": "weight_ranges", "zone": entry["zone"]},
                    )

        if method_type == PICKUP:
            zone_locations = []
            for entry in MethodService._drop_entries_without_zone(raw.get("zone_locations")):
                locations = MethodService._complete_locations(entry.get("locations"))
                if locations:
                    zone_locations.append({"zone": entry["zone"], "locations": locations})
            data["zone_locations"] = zone_locations
            data["default_locations"] = MethodService._complete_locations(raw.get("default_locations"))
            MethodService._ensure_zones_exist(entry["zone"] for entry in zone_locations)

            if not zone_locations and not data["default_locations"]:
                raise ShippingValidationError(
                    "픽업 배송은 최소 한 개 이상의 유효한 픽업 장소가 필요합니다.",
                    details={"field": "locations"},
                )

        try:
            parsed = parse_method_config(method_type, data)
        except MethodConfigError as e:
            raise ShippingValidationError(e.message, details=e.details)

        if parsed.valid_from and parsed.valid_until and parsed.valid_from > parsed.valid_until:
            raise ShippingValidationError(
                "유효 시작일은 종료일보다 늦을 수 없습니다.",
                details={"field": "valid_from"},
            )

        return parsed.to_dict()

    @staticmethod
    def _extract_type_block(method_type: str, config: dict) -> dict:
        if not isinstance(config, dict):
            raise ShippingValidationError("배송 방법 설정은 객체여야 합니다.", details={"field": "config"})

        legacy_keys = {key for keys in LEGACY_CONFIG_KEYS.values() for key in keys}
        if not legacy_keys.intersection(config):
            return dict(config)

        for key in LEGACY_CONFIG_KEYS[method_type]:
            block = config.get(key)
            if isinstance(block, dict):
                return dict(block)
        return {}

    @staticmethod
    def _drop_entries_without_zone(entries: Any) -> list[dict]:
        result = []
        for entry in entries or ():
            if not isinstance(entry, dict):
                continue
            try:
                zone_id = to_zone_id(entry.get("zone"))
            except MethodConfigError as e:
                raise ShippingValidationError(e.message, details=e.details)
            if zone_id is None:
                continue
            result.append({**entry, "zone": zone_id})
        return result

    @staticmethod
    def _complete_locations(locations: Any) -> list[dict]:
        return [location for location in locations or () if isinstance(location, dict) and PickupLocation.is_complete(location)]

    @staticmethod
    def _ensure_zones_exist(zone_ids) -> None:
        zone_ids = set(zone_ids)
        if not zone_ids:
            return
        existing = set(ShippingZone.objects.filter(pk__in=zone_ids).values_list("pk", flat=True))
        missing = sorted(zone_ids - existing)
        if missing:
            raise ShippingValidationError(
                "존재하지 않는 배송 구역이 포함되어 있습니다.",
                details={"field": "zone", "missing_zones": missing},
            )

    @staticmethod
    def _delivery_days(estimated_delivery: dict | None) -> tuple[int, int]:
        estimated_delivery = estimated_delivery or {}
        try:
            min_days = int(estimated_delivery.get("min_days", 1))
            max_days = int(estimated_delivery.get("max_days", 7))
        except (TypeError, ValueError):
            raise ShippingValidationError("예상 배송일은 정수여야 합니다.", details={"field": "estimated_delivery"})
        if min_days < 0 or max_days < min_days:
            raise ShippingValidationError(
                "예상 배송일 범위가 잘못되었습니다.",
                details={"field": "estimated_delivery", "min_days": min_days, "max_days": max_days},
            )
        return min_days, max_days

    # ===== 코드 생성 =====

    @staticmethod
    def generate_code(name: str, method_type: str, max_attempts: int | None = None) -> str:
        """
        배송 방법 코드 자동 생성

        형식: {FR|TS|PU}-{이름 앞 2글자 대문자}{01, 02, ...}
        예: Standard Delivery (flat_rate) → FR-ST01
        """
        max_attempts = max_attempts or settings.SHIPPING["CODE_MAX_ATTEMPTS"]
        letters = "".join(ch for ch in name if ch.isalnum())[:2].upper().ljust(2, "X")
        base = f"{TYPE_CODE_PREFIX[method_type]}-{letters}"

        for counter in range(1, max_attempts + 1):
            candidate = f"{base}{counter:02d}"
            if not ShippingMethod.objects.filter(code=candidate).exists():
                return candidate

        raise ConflictError(
            f"배송 방법 코드를 생성할 수 없습니다: {base}",
            details={"field": "code", "attempts": max_attempts},
        )
