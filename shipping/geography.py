"""
지리 참조 데이터 (주 / LGA)

배송 구역 생성 시 주(state)와 하위 지역(LGA) 이름을 검증하고,
'주 전체' 커버리지일 때 표시용 하위 지역 목록을 채우는 데 사용합니다.

참조 데이터는 프로세스 시작 후 한 번만 로드되며 변경되지 않습니다.
서비스는 RegionDirectory를 인자로 주입받을 수 있어
테스트에서는 대체 데이터를 사용할 수 있습니다.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Iterable, Iterator

from django.conf import settings

logger = logging.getLogger(__name__)


def normalize_name(value: str | None) -> str:
    """비교용 이름 정규화 (앞뒤 공백 제거, 연속 공백 축소, 대소문자 무시)"""
    if value is None:
        return ""
    return " ".join(str(value).split()).casefold()


@dataclass(frozen=True)
class Region:
    """주(state) 단위 참조 데이터"""

    name: str
    code: str
    capital: str = ""
    geopolitical_zone: str = ""
    sub_regions: tuple[str, ...] = ()

    def find_sub_region(self, name: str) -> str | None:
        """하위 지역 이름을 참조 데이터의 표기로 반환 (없으면 None)"""
        wanted = normalize_name(name)
        for sub_region in self.sub_regions:
            if normalize_name(sub_region) == wanted:
                return sub_region
        return None


class RegionDirectory:
    """
    주/하위 지역 참조 데이터 조회기

    이름 또는 코드로 대소문자 구분 없이 조회합니다.

    사용 예시:
        regions = RegionDirectory.from_json("nigeria_states_lgas.json")
        lagos = regions.get("lagos")
        regions.invalid_sub_regions("Lagos", ["Ikeja", "Unknown"])  # ["Unknown"]
    """

    def __init__(self, regions: Iterable[Region], country: str = "Nigeria"):
        self.country = country
        self._regions: tuple[Region, ...] = tuple(regions)
        self._index: dict[str, Region] = {}
        for region in self._regions:
            self._index[normalize_name(region.name)] = region
            if region.code:
                self._index.setdefault(normalize_name(region.code), region)

    @classmethod
    def from_json(cls, path: str | Path) -> RegionDirectory:
        """JSON 파일에서 참조 데이터를 로드"""
        with open(path, encoding="utf-8") as fp:
            payload = json.load(fp)

        regions = [
            Region(
                name=item["name"],
                code=item.get("code", ""),
                capital=item.get("capital", ""),
                geopolitical_zone=item.get("geopolitical_zone", ""),
                sub_regions=tuple(item.get("sub_regions", [])),
            )
            for item in payload["states"]
        ]
        logger.info("[Geography] 참조 데이터 로드 | path=%s, states=%d", path, len(regions))
        return cls(regions, country=payload.get("country", "Nigeria"))

    def __iter__(self) -> Iterator[Region]:
        return iter(self._regions)

    def __len__(self) -> int:
        return len(self._regions)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.get(name) is not None

    def get(self, name: str | None) -> Region | None:
        """주 이름 또는 코드로 조회"""
        if not name:
            return None
        return self._index.get(normalize_name(name))

    def invalid_sub_regions(self, state: str, names: Iterable[str]) -> list[str]:
        """해당 주에 존재하지 않는 하위 지역 이름 목록"""
        region = self.get(state)
        if region is None:
            return list(names)
        return [name for name in names if region.find_sub_region(name) is None]

    def by_geopolitical_zone(self) -> dict[str, list[Region]]:
        """지정학적 권역별 주 목록"""
        grouped: dict[str, list[Region]] = {}
        for region in self._regions:
            grouped.setdefault(region.geopolitical_zone, []).append(region)
        return grouped


@lru_cache(maxsize=1)
def get_region_directory() -> RegionDirectory:
    """설정의 REGION_DATA_FILE에서 기본 참조 데이터를 한 번만 로드"""
    return RegionDirectory.from_json(settings.SHIPPING["REGION_DATA_FILE"])
