from django.db import models
from django.utils.text import slugify

from mptt.models import MPTTModel, TreeForeignKey


class Category(MPTTModel):
    """
    상품 카테고리 (MPTT를 사용한 계층구조)

    배송 방법의 카테고리 적용 대상 판별에 사용됩니다.
    """

    name = models.CharField(max_length=100, unique=True, verbose_name="카테고리명")
    slug = models.SlugField(max_length=100, unique=True, help_text="URL에 사용될 짧은 이름 (자동생성됨)")
    parent = TreeForeignKey(
        "self",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="children",
        verbose_name="상위 카테고리",
    )
    is_active = models.BooleanField(default=True, verbose_name="활성화 여부")
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class MPTTMeta:
        """MPTT 설정"""

        order_insertion_by = ["name"]

    class Meta:
        db_table = "shipping_categories"
        verbose_name = "카테고리"
        verbose_name_plural = "카테고리"

    def __str__(self):
        return self.name

    def save(self, *args, **kwargs):
        # slug 자동 생성
        if not self.slug:
            self.slug = slugify(self.name, allow_unicode=True)
        super().save(*args, **kwargs)


class Product(models.Model):
    """
    상품 (배송 계산에 필요한 항목만 보관)

    - weight: kg 단위, 비어 있으면 기본 무게(SHIPPING["DEFAULT_ITEM_WEIGHT_KG"]) 적용
    - 배송 계산 대상: is_published=True 이고 is_available=True 인 상품
    """

    name = models.CharField(max_length=200, verbose_name="상품명")
    sku = models.CharField(max_length=50, unique=True, verbose_name="SKU")
    category = models.ForeignKey(
        Category,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="products",
        verbose_name="카테고리",
    )
    price = models.DecimalField(max_digits=12, decimal_places=2, default=0, verbose_name="가격")
    weight = models.DecimalField(
        max_digits=8,
        decimal_places=3,
        null=True,
        blank=True,
        verbose_name="무게(kg)",
    )
    is_published = models.BooleanField(default=True, verbose_name="공개 여부")
    is_available = models.BooleanField(default=True, verbose_name="판매 가능 여부")
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "shipping_products"
        verbose_name = "상품"
        verbose_name_plural = "상품 목록"
        ordering = ["id"]

    def __str__(self) -> str:
        return self.name
