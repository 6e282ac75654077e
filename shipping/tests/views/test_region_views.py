"""지리 참조 데이터 API 테스트 (/api/shipping/regions/)"""

from django.urls import reverse

import pytest
from rest_framework import status


@pytest.mark.django_db
class TestRegionViews:
    def test_list_states(self, api_client):
        response = api_client.get(reverse("region-list"))

        assert response.status_code == status.HTTP_200_OK
        names = [region["name"] for region in response.data["data"]]
        assert len(names) == 37
        assert "Lagos" in names
        assert "FCT" in names

    def test_retrieve_by_code_case_insensitive(self, api_client):
        """주 코드(소문자)로 LGA 목록 조회"""
        response = api_client.get(reverse("region-detail", kwargs={"state": "la"}))

        assert response.status_code == status.HTTP_200_OK
        data = response.data["data"]
        assert data["name"] == "Lagos"
        assert "Ikeja" in data["sub_regions"]
        assert data["sub_region_count"] == len(data["sub_regions"])

    def test_retrieve_unknown_state(self, api_client):
        response = api_client.get(reverse("region-detail", kwargs={"state": "Atlantis"}))

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.data["code"] == "NOT_FOUND"
        assert response.data["data"] == {"state": "Atlantis"}
