from __future__ import annotations

from django.conf import settings
from django.db import models

from shipping.geography import normalize_name


class ShippingZone(models.Model):
    """
    배송 구역

    - 여러 주(state)를 포함하며, 주마다 '전체' 또는 '특정 LGA'만 커버
    - 주소 → 구역 매칭은 활성 구역을 sort_order, 생성 순서로 순회하여
      처음 일치하는 구역을 사용
    """

    name = models.CharField(max_length=100, unique=True, verbose_name="구역명")
    code = models.CharField(max_length=20, unique=True, verbose_name="구역 코드")
    description = models.TextField(blank=True, verbose_name="설명")
    is_active = models.BooleanField(default=True, db_index=True, verbose_name="활성화 여부")
    sort_order = models.PositiveIntegerField(default=0, verbose_name="정렬 순서")

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
        verbose_name="생성자",
    )
    updated_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
        verbose_name="수정자",
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "shipping_zones"
        verbose_name = "배송 구역"
        verbose_name_plural = "배송 구역 목록"
        # 구역 매칭 우선순위와 동일
        ordering = ["sort_order", "created_at", "id"]

    def __str__(self) -> str:
        return f"{self.name} ({self.code})"

    def get_state(self, state: str) -> ShippingZoneState | None:
        """주 이름(대소문자 무시)으로 커버리지 항목 조회"""
        wanted = normalize_name(state)
        for zone_state in self.states.all():
            if normalize_name(zone_state.state_name) == wanted:
                return zone_state
        return None

    def covers(self, state: str, sub_region: str | None = None, city: str | None = None) -> bool:
        """해당 위치를 이 구역이 커버하는지"""
        zone_state = self.get_state(state)
        if zone_state is None:
            return False
        return zone_state.covers(sub_region, city)

    def coverage_stats(self) -> dict:
        """커버리지 통계 (주 수, 전체/부분 커버 주 수, 커버 LGA 수)"""
        total_states = 0
        full_coverage = 0
        sub_regions_covered = 0

        for zone_state in self.states.all():
            total_states += 1
            if zone_state.is_full_coverage:
                full_coverage += 1
                sub_regions_covered += len(zone_state.available_sub_regions or [])
            else:
                sub_regions_covered += len(zone_state.covered_sub_regions or [])

        return {
            "total_states": total_states,
            "states_with_full_coverage": full_coverage,
            "states_with_partial_coverage": total_states - full_coverage,
            "total_sub_regions_covered": sub_regions_covered,
        }

    @property
    def coverage_summary(self) -> str:
        stats = self.coverage_stats()
        return f"{stats['total_states']} states, {stats['total_sub_regions_covered']} LGAs covered"


class ShippingZoneState(models.Model):
    """
    배송 구역의 주(state)별 커버리지

    - coverage_type=all: 주 전체 커버 (covered_sub_regions 무시)
    - coverage_type=specific: covered_sub_regions에 포함된 LGA만 커버
    - available_sub_regions: 참조 데이터의 LGA 전체 목록 (표시용)
    """

    COVERAGE_ALL = "all"
    COVERAGE_SPECIFIC = "specific"
    COVERAGE_CHOICES = [
        (COVERAGE_ALL, "주 전체"),
        (COVERAGE_SPECIFIC, "특정 LGA"),
    ]

    zone = models.ForeignKey(
        ShippingZone,
        on_delete=models.CASCADE,
        related_name="states",
        verbose_name="배송 구역",
    )
    state_name = models.CharField(max_length=100, verbose_name="주 이름")
    state_code = models.CharField(max_length=10, blank=True, verbose_name="주 코드")
    coverage_type = models.CharField(
        max_length=10,
        choices=COVERAGE_CHOICES,
        default=COVERAGE_ALL,
        verbose_name="커버리지 유형",
    )
    available_sub_regions = models.JSONField(default=list, blank=True, verbose_name="전체 LGA 목록")
    covered_sub_regions = models.JSONField(default=list, blank=True, verbose_name="커버 LGA 목록")

    class Meta:
        db_table = "shipping_zone_states"
        verbose_name = "구역별 주 커버리지"
        verbose_name_plural = "구역별 주 커버리지 목록"
        ordering = ["id"]
        constraints = [
            models.UniqueConstraint(fields=["zone", "state_name"], name="unique_zone_state_name"),
        ]

    def __str__(self) -> str:
        return f"{self.zone_id}:{self.state_name} ({self.coverage_type})"

    @property
    def is_full_coverage(self) -> bool:
        # covered_sub_regions가 비어 있으면 하위호환을 위해 전체 커버로 취급
        return self.coverage_type == self.COVERAGE_ALL or not self.covered_sub_regions

    def covers(self, sub_region: str | None = None, city: str | None = None) -> bool:
        if self.is_full_coverage:
            return True

        # LGA가 없으면 도시명으로 대체
        location = sub_region or city
        if not location:
            return False

        wanted = normalize_name(location)
        return any(normalize_name(name) == wanted for name in self.covered_sub_regions)
