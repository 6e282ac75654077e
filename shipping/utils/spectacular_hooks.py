"""
drf-spectacular 태그 정리 hooks

Swagger 문서의 태그를 일관성 있게 정리합니다.
- 라우터 기본 태그(소문자 경로명) → 영문 태그로 변환
- 중복 태그 통합
"""

# 태그 변환 맵 (소문자/한글 → 영문)
TAG_MAPPING = {
    # 소문자 → 대문자
    "shipping": "Checkout Shipping",
    "zones": "Shipping Zones",
    "methods": "Shipping Methods",
    "regions": "Regions",
    "trackings": "Shipping Tracking",
    # 한글 → 영문
    "배송 구역": "Shipping Zones",
    "배송 방법": "Shipping Methods",
    "배송비": "Checkout Shipping",
    "지역": "Regions",
    "배송 추적": "Shipping Tracking",
}


def postprocess_tags(result: dict, generator, request, public) -> dict:
    """
    스키마 생성 후 태그 정리

    Args:
        result: OpenAPI 스키마 딕셔너리
        generator: SchemaGenerator 인스턴스
        request: HttpRequest
        public: bool

    Returns:
        수정된 스키마
    """
    if "paths" not in result:
        return result

    for methods in result["paths"].values():
        for operation in methods.values():
            if isinstance(operation, dict) and "tags" in operation:
                new_tags = []
                for tag in operation["tags"]:
                    new_tag = TAG_MAPPING.get(tag, tag)
                    if new_tag not in new_tags:
                        new_tags.append(new_tag)
                operation["tags"] = new_tags

    # 전체 tags 목록에서 중복 제거
    if "tags" in result:
        seen = set()
        unique_tags = []
        for tag in result["tags"]:
            mapped_name = TAG_MAPPING.get(tag.get("name", ""), tag.get("name", ""))
            if mapped_name not in seen:
                seen.add(mapped_name)
                tag["name"] = mapped_name
                unique_tags.append(tag)
        result["tags"] = unique_tags

    return result
