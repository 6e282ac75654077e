"""
배송 API 속도 제한 (Rate Limiting) 클래스

- 배송비 계산 엔드포인트: 체크아웃 화면에서 반복 호출되므로 별도 제한
- 전역 제한: 모든 API 요청에 대한 기본 제한

운영 환경에서는 Redis 캐시 백엔드를 사용하여 분산 환경에서도 제한을 공유합니다.
"""

from rest_framework.throttling import AnonRateThrottle, UserRateThrottle


# ============================================================
# 배송비 계산 Throttles
# ============================================================


class ShippingCalculateRateThrottle(UserRateThrottle):
    """
    배송비 계산 엔드포인트 속도 제한

    인증 사용자는 사용자 ID, 비인증 사용자는 IP 주소 기준으로 제한합니다.
    제한: 1분에 30회 (운영 기준)

    적용 대상: CheckoutShippingView, ShippingQuoteView, PublicShippingMethodsView
    """

    scope = "shipping_calculate"


# ============================================================
# 전역 Throttles
# ============================================================


class GlobalAnonRateThrottle(AnonRateThrottle):
    """
    비인증 사용자 전역 속도 제한

    제한: IP 주소당 1시간에 100회
    """

    scope = "anon_global"


class GlobalUserRateThrottle(UserRateThrottle):
    """
    인증 사용자 전역 속도 제한

    제한: 사용자당 1시간에 1000회
    """

    scope = "user_global"
