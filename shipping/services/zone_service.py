"""
배송 구역 관리 서비스

- 구역 생성/수정/삭제 (참조 데이터 기반 주/LGA 검증)
- 주소(주, LGA, 도시) → 구역 매칭
- 구역 코드 자동 생성
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from django.conf import settings
from django.core.cache import cache
from django.db import transaction
from django.db.models import Prefetch, Q, QuerySet

from shipping.geography import RegionDirectory, get_region_directory, normalize_name
from shipping.models import ShippingMethod, ShippingZone, ShippingZoneState

from .base import log_service_call
from .exceptions import ConflictError, DependencyError, InvalidStateError, InvalidSubRegionError, NotFoundError, ShippingValidationError

if TYPE_CHECKING:
    from django.contrib.auth.models import AbstractBaseUser

logger = logging.getLogger(__name__)


def _sub_region_name(value: Any) -> str:
    """LGA 항목은 문자열 또는 {"name": ...} 객체"""
    if isinstance(value, dict):
        value = value.get("name")
    return " ".join(str(value or "").split())


class ZoneService:
    """
    배송 구역 관련 비즈니스 로직 서비스

    참조 데이터(RegionDirectory)는 regions 인자로 주입할 수 있으며,
    생략하면 설정 파일 기준 기본 데이터를 사용합니다.
    """

    # ===== 조회 =====

    @staticmethod
    def get_zone(zone_id: int) -> ShippingZone:
        try:
            return ShippingZone.objects.prefetch_related("states").get(pk=zone_id)
        except (ShippingZone.DoesNotExist, ValueError, TypeError):
            raise NotFoundError("배송 구역을 찾을 수 없습니다.", details={"zone_id": zone_id})

    @staticmethod
    def list_zones(search: str | None = None, is_active: bool | None = None) -> QuerySet[ShippingZone]:
        queryset = ShippingZone.objects.prefetch_related("states")
        if search:
            queryset = queryset.filter(
                Q(name__icontains=search) | Q(code__icontains=search) | Q(states__state_name__icontains=search)
            ).distinct()
        if is_active is not None:
            queryset = queryset.filter(is_active=is_active)
        return queryset

    @staticmethod
    def get_active_zones() -> list[ShippingZone]:
        """
        활성 구역 목록 (매칭 우선순위 순서)

        Django 캐시에 보관하며 구역/커버리지 변경 시그널에서 무효화합니다.
        """
        cache_key = settings.SHIPPING["ACTIVE_ZONES_CACHE_KEY"]
        zones = cache.get(cache_key)
        if zones is None:
            zones = list(
                ShippingZone.objects.filter(is_active=True)
                .prefetch_related(Prefetch("states", queryset=ShippingZoneState.objects.order_by("id")))
                .order_by("sort_order", "created_at", "id")
            )
            cache.set(cache_key, zones, settings.SHIPPING["ACTIVE_ZONES_CACHE_TIMEOUT"])
        return zones

    @staticmethod
    def invalidate_active_zones_cache() -> None:
        cache.delete(settings.SHIPPING["ACTIVE_ZONES_CACHE_KEY"])

    # ===== 주소 → 구역 매칭 =====

    @staticmethod
    def resolve_zone(
        state: str | None,
        sub_region: str | None = None,
        city: str | None = None,
        zones: list[ShippingZone] | None = None,
    ) -> ShippingZone | None:
        """
        주소를 커버하는 첫 번째 활성 구역

        Args:
            state: 주 이름 (대소문자 무시)
            sub_region: LGA
            city: LGA가 없을 때 대신 비교할 도시명
            zones: 매칭 대상 구역 (생략 시 활성 구역 전체)

        Returns:
            ShippingZone 또는 None (커버하는 구역 없음)
        """
        if not state:
            return None

        candidates = zones if zones is not None else ZoneService.get_active_zones()
        for zone in candidates:
            if zone.covers(state, sub_region, city):
                logger.debug(
                    "[Zone] 구역 매칭 | state=%s, sub_region=%s, city=%s, zone=%s",
                    state,
                    sub_region,
                    city,
                    zone.code,
                )
                return zone

        logger.info("[Zone] 매칭 구역 없음 | state=%s, sub_region=%s, city=%s", state, sub_region, city)
        return None

    # ===== 생성 / 수정 / 삭제 =====

    @staticmethod
    @log_service_call
    @transaction.atomic
    def create_zone(
        name: str,
        states: list[dict],
        *,
        description: str = "",
        is_active: bool = True,
        sort_order: int = 0,
        code: str | None = None,
        user: AbstractBaseUser | None = None,
        regions: RegionDirectory | None = None,
    ) -> ShippingZone:
        """
        배송 구역 생성

        Args:
            name: 구역명 (필수, 중복 불가)
            states: [{"state_name", "state_code"?, "coverage_type", "covered_sub_regions"}]
            code: 구역 코드 (생략 시 이름 이니셜로 자동 생성)

        Raises:
            ShippingValidationError: 이름/주 목록 누락, specific인데 LGA 없음
            InvalidStateError: 참조 데이터에 없는 주
            InvalidSubRegionError: 해당 주에 없는 LGA
            ConflictError: 이름/코드 중복
        """
        regions = regions or get_region_directory()
        name = (name or "").strip()
        if not name:
            raise ShippingValidationError("구역명은 필수입니다.", details={"field": "name"})
        ZoneService._ensure_unique_name(name)

        normalized_states = ZoneService.normalize_states(states, regions)

        if code:
            code = code.strip().upper()
            if ShippingZone.objects.filter(code=code).exists():
                raise ConflictError(f"이미 사용 중인 구역 코드입니다: {code}", details={"field": "code"})
        else:
            code = ZoneService.generate_code(name)

        zone = ShippingZone.objects.create(
            name=name,
            code=code,
            description=description or "",
            is_active=is_active,
            sort_order=sort_order or 0,
            created_by=user,
            updated_by=user,
        )
        ZoneService._replace_states(zone, normalized_states)

        logger.info("[Zone] 구역 생성 | zone_id=%d, code=%s, states=%d", zone.pk, zone.code, len(normalized_states))
        return zone

    @staticmethod
    @log_service_call
    @transaction.atomic
    def update_zone(
        zone_id: int,
        *,
        user: AbstractBaseUser | None = None,
        regions: RegionDirectory | None = None,
        **fields: Any,
    ) -> ShippingZone:
        """
        배송 구역 부분 수정

        states가 주어지면 기존 주 목록 전체를 교체합니다. (생성과 같은 검증)
        """
        zone = ZoneService.get_zone(zone_id)
        update_fields = ["updated_by", "updated_at"]

        if "name" in fields:
            name = (fields["name"] or "").strip()
            if not name:
                raise ShippingValidationError("구역명은 필수입니다.", details={"field": "name"})
            ZoneService._ensure_unique_name(name, exclude_id=zone.pk)
            zone.name = name
            update_fields.append("name")

        if "code" in fields and fields["code"]:
            code = fields["code"].strip().upper()
            if ShippingZone.objects.filter(code=code).exclude(pk=zone.pk).exists():
                raise ConflictError(f"이미 사용 중인 구역 코드입니다: {code}", details={"field": "code"})
            zone.code = code
            update_fields.append("code")

        for field_name in ("description", "is_active", "sort_order"):
            if field_name in fields and fields[field_name] is not None:
                setattr(zone, field_name, fields[field_name])
                update_fields.append(field_name)

        zone.updated_by = user
        zone.save(update_fields=update_fields)

        if fields.get("states") is not None:
            normalized_states = ZoneService.normalize_states(fields["states"], regions or get_region_directory())
            ZoneService._replace_states(zone, normalized_states)

        logger.info("[Zone] 구역 수정 | zone_id=%d, fields=%s", zone.pk, sorted(fields))
        return ZoneService.get_zone(zone.pk)

    @staticmethod
    @log_service_call
    @transaction.atomic
    def delete_zone(zone_id: int, cascade: bool = False) -> dict:
        """
        배송 구역 삭제

        구역을 참조하는 배송 방법이 있으면 cascade=True일 때만
        해당 배송 방법을 먼저 삭제합니다.

        Returns:
            {"zone_id", "deleted_methods": [...]}

        Raises:
            DependencyError: 참조하는 배송 방법이 있는데 cascade=False
        """
        from .method_service import MethodService

        zone = ZoneService.get_zone(zone_id)
        dependents = ZoneService.find_dependent_methods(zone.pk)

        if dependents and not cascade:
            raise DependencyError(
                "이 구역을 사용하는 배송 방법이 있어 삭제할 수 없습니다.",
                details={
                    "dependent_methods": [
                        {"id": method.pk, "name": method.name, "code": method.code, "type": method.type}
                        for method in dependents
                    ]
                },
            )

        zone_pk = zone.pk
        deleted_methods = []
        for method in dependents:
            MethodService.delete_method(method.pk)
            deleted_methods.append(method.code)

        zone.delete()
        logger.info("[Zone] 구역 삭제 | zone_id=%d, cascade=%s, deleted_methods=%s", zone_pk, cascade, deleted_methods)
        return {"zone_id": zone_pk, "deleted_methods": deleted_methods}

    @staticmethod
    def find_dependent_methods(zone_id: int) -> list[ShippingMethod]:
        """구역별 배송비 또는 구역별 픽업 장소에서 이 구역을 참조하는 배송 방법"""
        return [method for method in ShippingMethod.objects.all() if method.references_zone(zone_id)]

    # ===== 검증 / 정규화 =====

    @staticmethod
    def normalize_states(states: list[dict] | None, regions: RegionDirectory) -> list[dict]:
        """
        주 커버리지 입력 검증 및 정규화

        - 주 이름/코드는 참조 데이터 표기로 통일
        - available_sub_regions는 참조 데이터의 전체 LGA 목록
        - specific이면 covered_sub_regions 1개 이상, 모두 해당 주의 LGA
        - all이면 covered_sub_regions는 비움
        """
        if not states:
            raise ShippingValidationError("최소 한 개 이상의 주(state)가 필요합니다.", details={"field": "states"})

        normalized = []
        seen: set[str] = set()

        for entry in states:
            if not isinstance(entry, dict):
                raise ShippingValidationError("주(state) 항목 형식이 잘못되었습니다.", details={"field": "states"})

            state_name = entry.get("state_name") or entry.get("name") or ""
            region = regions.get(state_name)
            if region is None:
                raise InvalidStateError(state_name)

            key = normalize_name(region.name)
            if key in seen:
                raise ShippingValidationError(
                    f"같은 주가 중복되었습니다: {region.name}",
                    details={"field": "states", "state": region.name},
                )
            seen.add(key)

            coverage_type = entry.get("coverage_type") or ShippingZoneState.COVERAGE_ALL
            if coverage_type not in (ShippingZoneState.COVERAGE_ALL, ShippingZoneState.COVERAGE_SPECIFIC):
                raise ShippingValidationError(
                    f"알 수 없는 커버리지 유형입니다: {coverage_type}",
                    details={"field": "coverage_type", "state": region.name},
                )

            covered: list[str] = []
            if coverage_type == ShippingZoneState.COVERAGE_SPECIFIC:
                names = [_sub_region_name(item) for item in entry.get("covered_sub_regions") or ()]
                names = [name for name in names if name]
                if not names:
                    raise ShippingValidationError(
                        f"{region.name}: 특정 LGA 커버리지는 최소 한 개 이상의 LGA가 필요합니다.",
                        details={"field": "covered_sub_regions", "state": region.name},
                    )
                invalid = regions.invalid_sub_regions(region.name, names)
                if invalid:
                    raise InvalidSubRegionError(region.name, invalid)
                for name in names:
                    canonical = region.find_sub_region(name)
                    if canonical not in covered:
                        covered.append(canonical)

            normalized.append(
                {
                    "state_name": region.name,
                    "state_code": (entry.get("state_code") or region.code).upper(),
                    "coverage_type": coverage_type,
                    "available_sub_regions": list(region.sub_regions),
                    "covered_sub_regions": covered,
                }
            )

        return normalized

    @staticmethod
    def generate_code(name: str, max_attempts: int | None = None) -> str:
        """
        구역 코드 자동 생성

        - 단어가 여러 개면 앞 3단어의 첫 글자, 한 단어면 앞 3글자 (대문자)
        - 2글자 미만이면 X로 채움
        - 중복 시 숫자 접미사 (BASE, BASE1, BASE2, ...)
        """
        max_attempts = max_attempts or settings.SHIPPING["CODE_MAX_ATTEMPTS"]
        words = [word for word in "".join(ch if ch.isalnum() else " " for ch in name).split() if word]

        if len(words) > 1:
            base = "".join(word[0] for word in words[:3])
        elif words:
            base = words[0][:3]
        else:
            base = ""
        base = base.upper().ljust(2, "X")

        candidate = base
        for attempt in range(1, max_attempts + 1):
            if not ShippingZone.objects.filter(code=candidate).exists():
                return candidate
            candidate = f"{base}{attempt}"

        raise ConflictError(
            f"구역 코드를 생성할 수 없습니다: {base}",
            details={"field": "code", "attempts": max_attempts},
        )

    @staticmethod
    def _ensure_unique_name(name: str, exclude_id: int | None = None) -> None:
        queryset = ShippingZone.objects.filter(name__iexact=name)
        if exclude_id is not None:
            queryset = queryset.exclude(pk=exclude_id)
        if queryset.exists():
            raise ConflictError(f"이미 존재하는 구역명입니다: {name}", details={"field": "name"})

    @staticmethod
    def _replace_states(zone: ShippingZone, normalized_states: list[dict]) -> None:
        zone.states.all().delete()
        ShippingZoneState.objects.bulk_create(
            [ShippingZoneState(zone=zone, **state) for state in normalized_states]
        )
        # bulk_create는 모델 시그널을 보내지 않으므로 직접 무효화
        ZoneService.invalidate_active_zones_cache()
