import logging

from django.conf import settings
from django.core.cache import cache

import pytest
from rest_framework.test import APIClient

from shipping.geography import Region, RegionDirectory
from shipping.services.zone_service import ZoneService
from shipping.tests.factories import (
    AddressFactory,
    ProductFactory,
    ShippingZoneFactory,
    ShippingZoneStateFactory,
    TestConstants,
    UserFactory,
    lagos_states,
)

# ==========================================
# 1. 전역 설정 (Session Scope)
# ==========================================


@pytest.fixture(scope="session", autouse=True)
def setup_celery_for_tests():
    """
    테스트 환경에서 Celery 동기 실행 설정

    Session scope: 전체 테스트 세션에서 한 번만 실행
    autouse: 자동으로 모든 테스트에 적용
    """
    settings.CELERY_TASK_ALWAYS_EAGER = True
    settings.CELERY_TASK_EAGER_PROPAGATES = True


@pytest.fixture(scope="session", autouse=True)
def setup_logging_for_tests():
    """
    테스트 환경에서 로그 propagation 활성화

    caplog가 로그를 캡처할 수 있도록 propagate=True로 설정
    """
    for logger_name in [
        "shipping.services",
        "shipping.views",
        "shipping.tasks",
    ]:
        logging.getLogger(logger_name).propagate = True


@pytest.fixture(autouse=True)
def clear_cache():
    """테스트마다 활성 구역 캐시 초기화"""
    cache.clear()
    yield
    cache.clear()


# ==========================================
# 2. API 클라이언트 Fixture
# ==========================================


@pytest.fixture
def api_client():
    """DRF APIClient 인스턴스 (비로그인)"""
    return APIClient()


@pytest.fixture
def user(db):
    """일반 사용자"""
    return UserFactory()


@pytest.fixture
def admin_user(db):
    """배송 관리자 (is_staff=True)"""
    return UserFactory(username="shipping_admin", is_staff=True)


@pytest.fixture
def authenticated_client(api_client, user):
    """일반 사용자로 인증된 클라이언트"""
    api_client.force_authenticate(user=user)
    return api_client


@pytest.fixture
def admin_client(api_client, admin_user):
    """배송 관리자로 인증된 클라이언트"""
    api_client.force_authenticate(user=admin_user)
    return api_client


# ==========================================
# 3. 참조 데이터 Fixture
# ==========================================


@pytest.fixture
def small_regions():
    """테스트 전용 소형 참조 데이터 (2개 주)"""
    return RegionDirectory(
        [
            Region(name="Alpha", code="AL", geopolitical_zone="North", sub_regions=("One", "Two", "Three")),
            Region(name="Beta", code="BE", geopolitical_zone="South", sub_regions=("Four", "Five")),
        ]
    )


# ==========================================
# 4. 구역 / 상품 / 주소 Fixture
# ==========================================


@pytest.fixture
def lagos_zone(db):
    """Lagos 주 전체를 커버하는 구역 (서비스로 생성)"""
    return ZoneService.create_zone("Lagos Zone", lagos_states(), sort_order=1)


@pytest.fixture
def abuja_zone(db):
    """FCT 주 전체를 커버하는 구역"""
    zone = ShippingZoneFactory(name="Abuja Zone", code="ABJ", sort_order=2)
    ShippingZoneStateFactory(zone=zone, state_name="FCT", state_code="FC")
    return zone


@pytest.fixture
def product(db):
    """1kg 원두"""
    return ProductFactory()


@pytest.fixture
def lagos_address(db, user):
    """Lagos / Ikeja 배송지"""
    return AddressFactory(user=user)


@pytest.fixture
def cart_items(product):
    """1kg 원두 2개"""
    return [{"product_id": product.pk, "quantity": 2}]


@pytest.fixture
def order_value():
    return TestConstants.DEFAULT_ORDER_VALUE
