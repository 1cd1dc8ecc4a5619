"""
Metrics instrumentation tests.
"""

import pytest
from prometheus_client import REGISTRY


def _get_metric_value(metric: str, labels: dict) -> float:
    value = REGISTRY.get_sample_value(metric, labels)
    return value or 0.0


@pytest.mark.asyncio
async def test_http_metrics_and_request_id(api_client):
    labels = {"method": "GET", "path": "/api/health/liveness", "status": "200"}
    before = _get_metric_value("app_http_requests_total", labels)

    response = await api_client.get("/api/health/liveness")

    after = _get_metric_value("app_http_requests_total", labels)
    assert after == pytest.approx(before + 1)
    assert "X-Request-ID" in response.headers
    assert response.headers["X-Request-ID"]


@pytest.mark.asyncio
async def test_request_id_is_propagated(api_client):
    response = await api_client.get("/api/health/liveness", headers={"X-Request-ID": "req-42"})

    assert response.headers["X-Request-ID"] == "req-42"


@pytest.mark.asyncio
async def test_login_outcomes_are_counted(api_client):
    success = {"event": "login", "outcome": "success"}
    rejected = {"event": "login", "outcome": "invalid_password"}
    success_before = _get_metric_value("app_auth_events_total", success)
    rejected_before = _get_metric_value("app_auth_events_total", rejected)

    await api_client.post(
        "/api/users/register",
        json={
            "username": "metric_user",
            "password": "longenough1",
            "email": "m@x.com",
            "full_name": "Metric User",
        },
    )
    await api_client.post(
        "/api/users/login", json={"username": "metric_user", "password": "longenough1"}
    )
    await api_client.post(
        "/api/users/login", json={"username": "metric_user", "password": "wrong-password"}
    )

    assert _get_metric_value("app_auth_events_total", success) == pytest.approx(success_before + 1)
    assert _get_metric_value("app_auth_events_total", rejected) == pytest.approx(rejected_before + 1)


@pytest.mark.asyncio
async def test_rejected_tokens_are_counted(api_client):
    labels = {"event": "token", "outcome": "rejected"}
    before = _get_metric_value("app_auth_events_total", labels)

    response = await api_client.get("/api/patients", headers={"Authorization": "Bearer nope"})

    assert response.status_code == 403
    assert _get_metric_value("app_auth_events_total", labels) == pytest.approx(before + 1)


@pytest.mark.asyncio
async def test_metrics_endpoint_exposes_counters(api_client):
    await api_client.get("/api/health/liveness")

    response = await api_client.get("/metrics/")

    assert response.status_code == 200
    assert "app_http_requests_total" in response.text


@pytest.mark.asyncio
async def test_parameterised_paths_keep_router_prefix(api_client, auth_headers):
    user_labels = {"method": "GET", "path": "/api/users/{user_id}", "status": "404"}
    patient_labels = {"method": "GET", "path": "/api/patients/{patient_id}", "status": "404"}
    users_before = _get_metric_value("app_http_requests_total", user_labels)
    patients_before = _get_metric_value("app_http_requests_total", patient_labels)

    await api_client.get("/api/users/missing")
    await api_client.get("/api/patients/missing", headers=auth_headers)

    assert _get_metric_value("app_http_requests_total", user_labels) == pytest.approx(users_before + 1)
    assert _get_metric_value("app_http_requests_total", patient_labels) == pytest.approx(
        patients_before + 1
    )


@pytest.mark.asyncio
async def test_collection_paths_are_labelled_in_full(api_client):
    labels = {"method": "GET", "path": "/api/users", "status": "200"}
    before = _get_metric_value("app_http_requests_total", labels)

    await api_client.get("/api/users")

    assert _get_metric_value("app_http_requests_total", labels) == pytest.approx(before + 1)
