from django.apps import AppConfig


class ShippingConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "shipping"
    verbose_name = "배송"

    def ready(self):
        """
        앱이 준비되면 시그널 등록

        배송 구역 변경 시 활성 구역 캐시와
        주소별 구역 메모이제이션이 무효화되도록 합니다.
        """
        import shipping.signals  # noqa
