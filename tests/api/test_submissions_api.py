"""Tests for the submission endpoints."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from safety_spine.api.app import create_app

BASE = "/api/v1/submissions"


@pytest.fixture()
def client(settings, conn, scheduler):
    app = create_app(settings=settings, conn=conn, scheduler=scheduler, start_scheduler=False)
    with TestClient(app) as test_client:
        yield test_client


class TestSubmissions:
    def test_record_and_list(self, client):
        body = {
            "form_type": "forklift-inspection",
            "location": "Dallas",
            "submitted_by": "J. Rivera",
            "submitted_at": "2026-10-19T13:00:00Z",
            "payload": {"forkliftId": "FL-12", "inspection": {"brakes": "Fail"}},
        }

        created = client.post(BASE, json=body)

        assert created.status_code == 201
        data = created.json()["data"]
        assert data["payload"]["forkliftId"] == "FL-12"
        assert data["submitted_at"].startswith("2026-10-19T13:00:00")

        listed = client.get(BASE, params={"form_type": "forklift-inspection"}).json()
        assert listed["page"]["total"] == 1
        assert listed["data"][0]["id"] == data["id"]

    def test_missing_form_type_is_422(self, client):
        assert client.post(BASE, json={"payload": {}}).status_code == 422

    def test_blank_form_type_is_400(self, client):
        response = client.post(BASE, json={"form_type": "", "payload": {}})
        assert response.status_code == 400
