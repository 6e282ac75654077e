"""
Celery 설정 파일
Redis를 브로커로 사용하여 비동기 작업 처리
"""

from __future__ import annotations

import os

from celery import Celery
from celery.schedules import crontab
from celery.signals import task_failure
from celery.utils.log import get_task_logger

# Django 설정 모듈 지정
os.environ.setdefault("DJANGO_SETTINGS_MODULE", "coffeeshop.settings")

# Celery 앱 생성
app = Celery("coffeeshop")

# Django 설정에서 CELERY_ 접두사가 붙은 설정 로드
app.config_from_object("django.conf:settings", namespace="CELERY")

# 등록된 Django 앱에서 tasks 자동 로드
app.autodiscover_tasks()

# Celery Beat 스케줄 설정
app.conf.beat_schedule = {
    # 예상 배송일이 지난 배송 점검 - 매일 오전 9시
    "report-overdue-trackings": {
        "task": "shipping.tasks.tracking_tasks.report_overdue_trackings_task",
        "schedule": crontab(hour=9, minute=0),  # 매일 09:00
        "options": {
            "expires": 3600,  # 1시간 후 만료
        },
    },
}

# Celery 설정
app.conf.update(
    # 작업 결과 만료 시간 (초)
    result_expires=3600,
    # 작업 직렬화 방식
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    # 작업 실행 옵션
    task_soft_time_limit=300,  # 5분
    task_time_limit=600,  # 10분
    # 워커 설정
    worker_max_tasks_per_child=1000,  # 메모리 누수 방지
    worker_prefetch_multiplier=4,
    # 큐 설정
    task_default_queue="default",
    task_queues={
        "default": {
            "exchange": "default",
            "exchange_type": "direct",
            "routing_key": "default",
        },
        "shipping": {  # 배송 구역/추적 관련 작업
            "exchange": "shipping",
            "exchange_type": "direct",
            "routing_key": "shipping",
        },
    },
    # 라우팅 설정
    task_routes={
        "shipping.tasks.zone_tasks.*": {
            "queue": "shipping",
            "routing_key": "shipping",
        },
        "shipping.tasks.tracking_tasks.*": {
            "queue": "shipping",
            "routing_key": "shipping",
        },
    },
)

logger = get_task_logger(__name__)


@task_failure.connect
def task_failure_handler(sender, task_id, exception, **kwargs):
    """
    Log failed tasks
    """
    logger.error(f"Task failed: {sender.name}, task_id={task_id}, error={exception}")
