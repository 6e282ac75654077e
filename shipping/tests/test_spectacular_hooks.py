"""Swagger 태그 정리 hook 테스트"""

from shipping.utils.spectacular_hooks import postprocess_tags


class TestPostprocessTags:
    def test_router_tags_mapped_and_deduplicated(self):
        # Arrange
        schema = {
            "paths": {
                "/api/shipping/zones/": {"get": {"tags": ["zones", "Shipping Zones"]}},
                "/api/shipping/quote/": {"post": {"tags": ["배송비"]}},
            },
            "tags": [{"name": "zones"}, {"name": "Shipping Zones"}, {"name": "배송비"}],
        }

        # Act
        result = postprocess_tags(schema, None, None, True)

        # Assert
        assert result["paths"]["/api/shipping/zones/"]["get"]["tags"] == ["Shipping Zones"]
        assert result["paths"]["/api/shipping/quote/"]["post"]["tags"] == ["Checkout Shipping"]
        assert [tag["name"] for tag in result["tags"]] == ["Shipping Zones", "Checkout Shipping"]

    def test_schema_without_paths_untouched(self):
        assert postprocess_tags({"info": {}}, None, None, True) == {"info": {}}
