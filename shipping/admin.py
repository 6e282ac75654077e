from django.contrib import admin
from mptt.admin import DraggableMPTTAdmin

from .models import (
    Address,
    Category,
    Order,
    Product,
    ShippingMethod,
    ShippingTracking,
    ShippingZone,
    ShippingZoneState,
    TrackingEvent,
)


# ShippingZone 관련 Inline
class ShippingZoneStateInline(admin.TabularInline):
    """구역 편집 페이지에서 주 커버리지를 함께 관리"""

    model = ShippingZoneState
    extra = 0
    fields = ["state_name", "state_code", "coverage_type", "covered_sub_regions"]


# ShippingZone Admin
@admin.register(ShippingZone)
class ShippingZoneAdmin(admin.ModelAdmin):
    """
    배송 구역 관리
    - 주 커버리지 인라인 편집
    - 정렬 순서가 매칭 우선순위
    """

    list_display = ["name", "code", "state_count", "sort_order", "is_active", "created_at"]
    list_filter = ["is_active"]
    search_fields = ["name", "code", "states__state_name"]
    ordering = ["sort_order", "created_at"]
    readonly_fields = ["created_by", "updated_by", "created_at", "updated_at"]
    inlines = [ShippingZoneStateInline]

    def state_count(self, obj):
        return obj.states.count()

    state_count.short_description = "주 수"


# ShippingMethod Admin
@admin.register(ShippingMethod)
class ShippingMethodAdmin(admin.ModelAdmin):
    """
    배송 방법 관리

    설정(config)은 API를 통해 검증 후 저장하는 것을 권장합니다.
    """

    list_display = ["name", "code", "type", "delivery_days", "sort_order", "is_active"]
    list_filter = ["type", "is_active"]
    search_fields = ["name", "code", "description"]
    ordering = ["sort_order", "name"]
    readonly_fields = ["created_by", "updated_by", "created_at", "updated_at"]

    fieldsets = (
        ("기본 정보", {"fields": ("name", "code", "type", "description")}),
        ("노출 설정", {"fields": ("is_active", "sort_order", "estimated_min_days", "estimated_max_days")}),
        ("배송 설정", {"fields": ("config",)}),
        (
            "관리 정보",
            {"fields": ("created_by", "updated_by", "created_at", "updated_at"), "classes": ("collapse",)},
        ),
    )

    def delivery_days(self, obj):
        return f"{obj.estimated_min_days}~{obj.estimated_max_days}일"

    delivery_days.short_description = "예상 배송일"


# Address Admin
@admin.register(Address)
class AddressAdmin(admin.ModelAdmin):
    list_display = ["user", "state", "sub_region", "city", "shipping_zone", "is_active"]
    list_filter = ["state", "is_active"]
    search_fields = ["user__username", "address_line", "city", "state", "sub_region"]
    raw_id_fields = ["user"]


# Category Admin
@admin.register(Category)
class CategoryAdmin(DraggableMPTTAdmin):
    """
    카테고리 관리자 페이지 설정
    MPTT 드래그 앤 드롭 기능 포함
    """

    mptt_level_indent = 20  # 계층별 들여쓰기 픽셀

    list_display = ["tree_actions", "indented_title", "is_active"]
    list_display_links = ["indented_title"]
    list_filter = ["is_active"]
    search_fields = ["name", "slug"]
    prepopulated_fields = {"slug": ("name",)}


# Product Admin
@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = ["name", "sku", "category", "price", "weight", "is_published", "is_available"]
    list_filter = ["category", "is_published", "is_available"]
    search_fields = ["name", "sku"]


# Order Admin
@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    list_display = ["order_number", "user", "status", "shipping_method", "shipping_zone", "shipping_cost", "created_at"]
    list_filter = ["status", "shipping_method", "created_at"]
    search_fields = ["order_number", "user__username"]
    date_hierarchy = "created_at"
    ordering = ["-created_at"]
    raw_id_fields = ["user", "address"]


# ShippingTracking 관련 Inline
class TrackingEventInline(admin.TabularInline):
    """배송 추적 편집 페이지에서 이력 확인"""

    model = TrackingEvent
    extra = 0
    readonly_fields = ["status", "description", "location", "is_customer_visible", "created_by", "created_at"]
    can_delete = False  # 이력은 삭제 불가


# ShippingTracking Admin
@admin.register(ShippingTracking)
class ShippingTrackingAdmin(admin.ModelAdmin):
    """
    배송 추적 관리
    상태 변경은 이력 추가 API를 사용합니다 (주문 상태 연동).
    """

    list_display = ["tracking_number", "order", "carrier_name", "status", "estimated_delivery", "actual_delivery"]
    list_filter = ["status", "carrier_code"]
    search_fields = ["tracking_number", "order__order_number", "carrier_name"]
    readonly_fields = ["status", "actual_delivery", "delivery_address", "created_by", "created_at", "updated_at"]
    inlines = [TrackingEventInline]
