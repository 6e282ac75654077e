"""
Shipping Configuration
배송 구역/배송비 계산 관련 설정을 관리합니다.

필요한 환경변수 (.env 파일에 설정, 모두 선택):
# SHIPPING_REGION_DATA_FILE=...           # 주(state)/LGA 참조 데이터 JSON 경로
# SHIPPING_DEFAULT_ITEM_WEIGHT_KG=1       # 무게 미등록 상품의 기본 무게 (kg)
# SHIPPING_CODE_MAX_ATTEMPTS=999          # 코드 자동 생성 시 최대 재시도 횟수
# SHIPPING_ACTIVE_ZONES_CACHE_TIMEOUT=300 # 활성 구역 목록 캐시 유지 시간 (초)
"""

import os
from pathlib import Path

_DEFAULT_REGION_DATA_FILE = (
    Path(__file__).resolve().parent.parent.parent.parent / "shipping" / "data" / "nigeria_states_lgas.json"
)

SHIPPING = {
    # 참조 데이터 (프로세스 시작 후 1회 로드)
    "REGION_DATA_FILE": os.environ.get("SHIPPING_REGION_DATA_FILE", str(_DEFAULT_REGION_DATA_FILE)),
    "DEFAULT_COUNTRY": os.environ.get("SHIPPING_DEFAULT_COUNTRY", "Nigeria"),
    # 무게 계산
    "DEFAULT_ITEM_WEIGHT_KG": os.environ.get("SHIPPING_DEFAULT_ITEM_WEIGHT_KG", "1"),
    # 코드 생성
    "CODE_MAX_ATTEMPTS": int(os.environ.get("SHIPPING_CODE_MAX_ATTEMPTS", 999)),
    # 활성 구역 캐시
    "ACTIVE_ZONES_CACHE_KEY": "shipping:active_zones",
    "ACTIVE_ZONES_CACHE_TIMEOUT": int(os.environ.get("SHIPPING_ACTIVE_ZONES_CACHE_TIMEOUT", 300)),
    # 표시용
    "CURRENCY_SYMBOL": os.environ.get("SHIPPING_CURRENCY_SYMBOL", "₦"),
}
