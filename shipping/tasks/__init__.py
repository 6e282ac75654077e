"""
Celery 태스크 패키지
모든 태스크를 여기서 임포트하여 Celery가 자동으로 발견할 수 있게 함
"""

from .tracking_tasks import report_overdue_trackings_task
from .zone_tasks import invalidate_address_zone_memo

__all__ = [
    # 배송 구역 태스크
    "invalidate_address_zone_memo",
    # 배송 추적 태스크
    "report_overdue_trackings_task",
]
