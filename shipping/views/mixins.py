"""View mixins for common functionality"""

from __future__ import annotations

import logging
from typing import Any

from django.core.exceptions import PermissionDenied as DjangoPermissionDenied
from django.http import Http404
from rest_framework import exceptions, status
from rest_framework.response import Response

from ..services.exceptions import MethodConfigError, ServiceError

logger = logging.getLogger(__name__)

# 서비스 에러 코드 → HTTP 상태 (없으면 400)
SERVICE_ERROR_STATUS = {
    "NOT_FOUND": status.HTTP_404_NOT_FOUND,
}

GENERIC_ERROR_MESSAGE = "요청을 처리하는 중 오류가 발생했습니다. 잠시 후 다시 시도해주세요."


def envelope(message: str, data: Any = None, *, error: bool = False, **extra: Any) -> dict:
    """공통 응답 형식 {message, data, error, success}"""
    return {"message": message, "data": data, "error": error, "success": not error, **extra}


class EnvelopeResponseMixin:
    """
    응답을 {message, data, error, success} 형식으로 통일하는 Mixin

    - 성공: success_response()
    - 서비스 에러(ServiceError, MethodConfigError): 코드에 맞는 상태 + code/details
    - DRF 예외: 기존 상태 코드 유지, 검증 오류는 data에 필드별 오류
    - 그 외 예외: 500 + 일반 메시지 (내부 정보는 로그에만 기록)
    """

    def success_response(self, data: Any = None, message: str = "처리되었습니다.", status_code: int = status.HTTP_200_OK) -> Response:
        return Response(envelope(message, data), status=status_code)

    def handle_exception(self, exc: Exception) -> Response:
        if isinstance(exc, (ServiceError, MethodConfigError)):
            return self._service_error_response(exc)

        if isinstance(exc, (exceptions.APIException, Http404, DjangoPermissionDenied)):
            response = super().handle_exception(exc)
            response.data = self._api_error_envelope(exc, response.data)
            return response

        logger.exception(
            "[API] 처리되지 않은 예외 | view=%s, error=%s",
            self.__class__.__name__,
            exc,
        )
        return Response(envelope(GENERIC_ERROR_MESSAGE, error=True), status=status.HTTP_500_INTERNAL_SERVER_ERROR)

    def _service_error_response(self, exc: ServiceError | MethodConfigError) -> Response:
        http_status = SERVICE_ERROR_STATUS.get(exc.code, status.HTTP_400_BAD_REQUEST)
        logger.info(
            "[API] 서비스 에러 응답 | view=%s, code=%s, status=%d",
            self.__class__.__name__,
            exc.code,
            http_status,
        )
        return Response(
            envelope(exc.message, exc.details or None, error=True, code=exc.code),
            status=http_status,
        )

    @staticmethod
    def _api_error_envelope(exc: Exception, data: Any) -> dict:
        if isinstance(exc, exceptions.ValidationError):
            return envelope("입력값이 올바르지 않습니다.", data, error=True, code="VALIDATION_ERROR")

        detail = data.get("detail") if isinstance(data, dict) else None
        code = getattr(detail, "code", None) or getattr(exc, "default_code", "error")
        if isinstance(exc, Http404):
            code = "NOT_FOUND"
        return envelope(str(detail or exc), None, error=True, code=str(code).upper())


def request_user(request):
    """인증된 사용자 (비로그인이면 None)"""
    user = getattr(request, "user", None)
    return user if user is not None and user.is_authenticated else None
