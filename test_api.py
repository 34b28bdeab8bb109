"""Test the HTTP surface: analyze, reports, stats, patterns."""
import pytest
from fastapi.testclient import TestClient

from vigilantlink import config
from vigilantlink.main import app, get_store
from vigilantlink.store import InMemoryReportStore, PersistenceError


class FailingStore(InMemoryReportStore):
    def save(self, report):
        raise PersistenceError("disk full")


@pytest.fixture
def store():
    return InMemoryReportStore()


@pytest.fixture
def client(store, monkeypatch):
    monkeypatch.setattr(config, "API_KEYS", {"key-alice": "alice", "key-bob": "bob"})
    app.dependency_overrides[get_store] = lambda: store
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_health(client):
    r = client.get("/")
    assert r.status_code == 200
    assert r.json()["status"] == "online"


def test_analyze_returns_verdict_fields(client):
    r = client.post("/analyze", json={"message": "Pay ₹1 and get ₹500 cashback instantly! Limited time offer. Scan now!"})
    assert r.status_code == 200
    data = r.json()
    assert set(data) == {"classification", "riskScore", "detectedPatterns", "analysis"}
    assert set(data["analysis"]) == {
        "suspiciousKeywords", "paymentKeywords", "safeIndicators", "hasLinks", "hasPhoneNumber",
    }
    assert data["classification"] == "high_risk"
    assert data["riskScore"] == 100


def test_analyze_empty_message_is_safe(client):
    r = client.post("/analyze", json={"message": ""})
    assert r.status_code == 200
    assert r.json()["classification"] == "safe"


def test_analyze_lone_surrogate_in_json(client):
    r = client.post(
        "/analyze",
        content='{"message": "verify \\ud800 pay"}',
        headers={"Content-Type": "application/json"},
    )
    assert r.status_code == 200
    assert r.json()["classification"] == "safe"


def test_analyze_missing_message_is_422(client):
    r = client.post("/analyze", json={})
    assert r.status_code == 422
    assert r.json()["message"] == "Invalid request payload."


def test_save_then_history_for_user(client, store):
    verdict = client.post("/analyze", json={"message": "Update KYC now"}).json()
    body = {"message": "Update KYC now", **{k: verdict[k] for k in ("classification", "riskScore", "detectedPatterns")}}

    r = client.post("/reports", json=body, headers={"x-api-key": "key-alice"})
    assert r.status_code == 201
    saved = r.json()
    assert saved["userId"] == "alice"
    assert saved["reportedAt"] > 0
    assert saved["reportedAt"] == store.get(saved["id"]).reportedAt

    history = client.get("/reports/me", headers={"x-api-key": "key-alice"}).json()
    assert len(history) == 1
    assert history[0]["id"] == saved["id"]
    assert history[0]["classification"] == "warning"
    assert history[0]["detectedPatterns"] == ["KYC update request"]

    assert client.get("/reports/me", headers={"x-api-key": "key-bob"}).json() == []


def test_anonymous_save_and_empty_history(client, store):
    body = {"message": "hi", "classification": "safe", "riskScore": 0, "detectedPatterns": []}
    r = client.post("/reports", json=body)
    assert r.status_code == 201
    assert r.json()["userId"] is None
    assert len(store) == 1
    assert client.get("/reports/me").json() == []


def test_unknown_key_degrades_to_anonymous(client, store):
    body = {"message": "hi", "classification": "safe", "riskScore": 0}
    r = client.post("/reports", json=body, headers={"x-api-key": "nope"})
    assert r.status_code == 201
    assert r.json()["userId"] is None


def test_save_rejects_bad_classification(client):
    body = {"message": "hi", "classification": "unknown", "riskScore": 0}
    assert client.post("/reports", json=body).status_code == 422


def test_persistence_failure_is_503(client):
    app.dependency_overrides[get_store] = lambda: FailingStore()
    body = {"message": "hi", "classification": "safe", "riskScore": 0}
    r = client.post("/reports", json=body)
    assert r.status_code == 503
    assert r.json()["detail"].startswith("Persistence failed")


def test_stats(client):
    for cls, score in (("high_risk", 100), ("warning", 40), ("safe", 0), ("high_risk", 80)):
        client.post("/reports", json={"message": "m", "classification": cls, "riskScore": score})
    assert client.get("/stats").json() == {"total": 4, "highRisk": 2, "warning": 1, "safe": 1}
    assert client.get("/stats", params={"limit": 1}).json()["total"] == 1


def test_patterns_catalogue(client):
    rules = client.get("/patterns").json()
    assert len(rules) == 18
    weights = {r["category"]: r["weight"] for r in rules}
    assert weights == {"HighRisk": 80, "Warning": 40, "SafeIndicator": -20}
    assert rules[0]["description"] == "Fake cashback scan trap"
