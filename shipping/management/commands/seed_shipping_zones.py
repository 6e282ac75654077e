"""
기본 배송 구역 생성 Management Command

참조 데이터의 지정학적 권역(North Central, South West 등)마다 배송 구역을 하나씩 만듭니다.
Lagos와 FCT는 주문량이 많아 별도 구역으로 분리하고 가장 높은 우선순위를 줍니다.
이미 같은 이름의 구역이 있으면 건너뜁니다.
"""

from django.core.management.base import BaseCommand

from shipping.geography import get_region_directory
from shipping.models import ShippingZone
from shipping.services.zone_service import ZoneService

# 권역 구역보다 먼저 매칭되는 단독 구역
DEDICATED_STATES = ["Lagos", "FCT"]


class Command(BaseCommand):
    help = "지정학적 권역별 기본 배송 구역을 생성합니다 (Lagos, FCT는 단독 구역)"

    def add_arguments(self, parser):
        parser.add_argument(
            "--inactive",
            action="store_true",
            help="생성한 구역을 비활성 상태로 둡니다",
        )
        parser.add_argument(
            "--dry-run",
            action="store_true",
            help="실제 생성하지 않고 생성 대상만 출력",
        )

    def handle(self, *args, **options):
        regions = get_region_directory()
        is_active = not options["inactive"]
        dry_run = options["dry_run"]

        plans = []
        for sort_order, state in enumerate(DEDICATED_STATES, start=1):
            plans.append((f"{state} Zone", [state], sort_order))

        next_order = len(DEDICATED_STATES) + 1
        for index, (geo_zone, members) in enumerate(sorted(regions.by_geopolitical_zone().items())):
            states = [region.name for region in members if region.name not in DEDICATED_STATES]
            if states:
                plans.append((f"{geo_zone} Zone", states, next_order + index))

        self.stdout.write(self.style.WARNING(f"=== 배송 구역 생성 {'(DRY RUN)' if dry_run else ''} ==="))

        created = 0
        skipped = 0
        for name, states, sort_order in plans:
            if ShippingZone.objects.filter(name__iexact=name).exists():
                skipped += 1
                self.stdout.write(f"- {name}: 이미 존재 (건너뜀)")
                continue

            if dry_run:
                self.stdout.write(f"- {name}: {len(states)}개 주 ({', '.join(states)})")
                continue

            zone = ZoneService.create_zone(
                name,
                [{"state_name": state, "coverage_type": "all"} for state in states],
                description=f"{', '.join(states)}",
                is_active=is_active,
                sort_order=sort_order,
                regions=regions,
            )
            created += 1
            self.stdout.write(f"- {zone.name} ({zone.code}): {len(states)}개 주")

        self.stdout.write("")
        self.stdout.write(self.style.SUCCESS(f"✓ 생성 {created}개, 건너뜀 {skipped}개"))
