"""
API test suite for the platform shell.
Covers contact stats, Sales Engine proxies and their mock fallbacks, the SEO
stub, the deprecated run endpoint, and the basic auth gate.
"""

import base64

from platform_shell.clients.sales_engine import get_sales_engine_client
from platform_shell.db.connection import get_default_store
from platform_shell.error_handler import SalesEngineError


ZERO_STATS = {
    "total": 0, "pending": 0, "processing": 0, "ready": 0, "blocked": 0,
    "unavailable": 0, "leadsCreated": 0, "readyWithoutLead": 0,
}


class FakeSalesEngine:
    """Stand-in for SalesEngineClient that records calls."""

    def __init__(self, responses=None, error=None):
        self.responses = responses or {}
        self.error = error
        self.calls = []

    def get_json(self, path, authorization=None):
        self.calls.append((path, authorization))
        if self.error is not None:
            raise self.error
        return self.responses[path]


def _use_engine(app, fake):
    app.dependency_overrides[get_sales_engine_client] = lambda: fake
    return fake


# =============================================================================
# HEALTH
# =============================================================================

class TestHealth:

    def test_health_reports_integrations(self, client, monkeypatch):
        """GET /api/health should say which integrations are configured."""
        response = client.get("/api/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["database_configured"] is False
        assert data["sales_engine_configured"] is False
        assert data["basic_auth_enabled"] is False

        monkeypatch.setenv("SALES_ENGINE_API_BASE_URL", "https://engine.example.com")
        assert client.get("/api/health").json()["sales_engine_configured"] is True


# =============================================================================
# CONTACT STATS
# =============================================================================

class TestContactStats:

    def test_unconfigured_returns_exact_zero_record(self, client):
        """No data store configured -> all-zero stats without touching storage."""
        response = client.get("/api/campaigns/camp-123/contact-stats")
        assert response.status_code == 200
        assert response.json() == ZERO_STATS

    def test_stats_from_store(self, app, client, store, seed_contacts):
        seed_contacts([
            {"campaign_id": "camp-1", "status": "sourced"},
            {"campaign_id": "camp-1", "status": "ready", "email_usable": 1},
            {"campaign_id": "camp-1", "status": "blocked", "lead_id": None},
            {"campaign_id": "camp-1", "status": "ready", "email_usable": 1, "lead_id": "lead-1"},
        ])
        app.dependency_overrides[get_default_store] = lambda: store

        data = client.get("/api/campaigns/camp-1/contact-stats").json()

        assert data["total"] == 4
        assert data["pending"] == 1
        assert data["ready"] == 2
        assert data["blocked"] == 1
        assert data["leadsCreated"] == 1
        assert data["readyWithoutLead"] == 1
        assert data["unavailable"] == 0

    def test_stats_from_env_configured_store(self, client, monkeypatch, contacts_db, seed_contacts):
        """The default store is built from SHELL_DB_PATH on first use."""
        seed_contacts([{"campaign_id": "camp-9", "status": "sourced"}])
        monkeypatch.setenv("SHELL_DB_PATH", contacts_db)

        data = client.get("/api/campaigns/camp-9/contact-stats").json()
        assert data["total"] == 1
        assert data["pending"] == 1

    def test_query_failure_returns_500(self, app, client, broken_store):
        app.dependency_overrides[get_default_store] = lambda: broken_store
        response = client.get("/api/campaigns/camp-1/contact-stats")
        assert response.status_code == 500
        assert response.json() == {"error": "Failed to fetch contact stats"}

    def test_missing_database_returns_500(self, client, monkeypatch, tmp_path):
        db_path = tmp_path / "not-there.db"
        monkeypatch.setenv("SHELL_DB_PATH", str(db_path))
        response = client.get("/api/campaigns/camp-1/contact-stats")
        assert response.status_code == 500
        assert response.json() == {"error": "Failed to fetch contact stats"}
        assert not db_path.exists()

    def test_unexpected_store_error_returns_json_500(self, app, client):
        class ExplodingStore:
            def fetch_one(self, sql, params=()):
                raise RuntimeError("driver bug")

            def fetch_all(self, sql, params=()):
                raise RuntimeError("driver bug")

        app.dependency_overrides[get_default_store] = lambda: ExplodingStore()
        response = client.get("/api/campaigns/camp-1/contact-stats")
        assert response.status_code == 500
        assert response.json() == {"error": "Failed to fetch contact stats"}

        response = client.get("/api/campaigns/camp-1/contact-stats/blocked-reasons")
        assert response.status_code == 500
        assert response.json() == {"error": "Failed to fetch blocked reasons"}

    def test_blocked_reasons(self, app, client, store, seed_contacts):
        seed_contacts([
            {"campaign_id": "camp-1", "email_usable": 0, "email_block_reason": "invalid email"},
            {"campaign_id": "camp-1", "status": "blocked", "status_reason": "Excluded title"},
        ])
        app.dependency_overrides[get_default_store] = lambda: store

        data = client.get("/api/campaigns/camp-1/contact-stats/blocked-reasons").json()
        assert data["total"] == 2
        assert data["reasons"]["invalid_email"] == 1
        assert data["reasons"]["excluded_title"] == 1
        assert data["percentages"]["invalid_email"] == 50
        assert data["percentages"]["other"] == 0

    def test_blocked_reasons_unconfigured(self, client):
        data = client.get("/api/campaigns/camp-1/contact-stats/blocked-reasons").json()
        assert data["total"] == 0
        assert set(data["reasons"]) == {"no_email", "invalid_email", "low_fit_score",
                                        "excluded_title", "other"}

    def test_blocked_reasons_failure(self, app, client, broken_store):
        app.dependency_overrides[get_default_store] = lambda: broken_store
        response = client.get("/api/campaigns/camp-1/contact-stats/blocked-reasons")
        assert response.status_code == 500
        assert response.json() == {"error": "Failed to fetch blocked reasons"}


# =============================================================================
# DEPRECATED RUN ENDPOINT
# =============================================================================

class TestDeprecatedRun:

    def test_run_returns_410(self, client):
        for campaign_id in ("camp-1", "00000000-0000-0000-0000-000000000000", "x"):
            response = client.post(f"/api/v1/campaigns/{campaign_id}/run")
            assert response.status_code == 410
            data = response.json()
            assert data["error"] == "ENDPOINT_DEPRECATED"
            assert data["campaign_id"] == campaign_id

    def test_run_never_calls_backend(self, app, client):
        fake = _use_engine(app, FakeSalesEngine())
        assert client.post("/api/v1/campaigns/camp-1/run").status_code == 410
        assert fake.calls == []


# =============================================================================
# SEO PAGES STUB
# =============================================================================

class TestSeoPages:

    def test_get_returns_placeholder(self, client):
        data = client.get("/api/seo/pages").json()
        assert data["data"] == []
        assert data["total"] == 0
        assert data["page"] == 1
        assert data["pageSize"] == 25
        assert data["hasMore"] is False
        assert data["_meta"]["implemented"] is False

    def test_get_echoes_pagination(self, client):
        data = client.get("/api/seo/pages?page=3&pageSize=10").json()
        assert data["page"] == 3
        assert data["pageSize"] == 10

    def test_mutations_not_allowed(self, client):
        for method in ("post", "put", "delete"):
            response = getattr(client, method)("/api/seo/pages")
            assert response.status_code == 405
            assert response.json()["error"] == "Method not allowed"


# =============================================================================
# SALES ENGINE PROXIES
# =============================================================================

class TestCampaignProxies:

    def test_metrics_mock_when_unconfigured(self, client):
        data = client.get("/api/v1/campaigns/camp-7/metrics").json()
        assert data["campaign_id"] == "camp-7"
        assert data["total_leads"] == 1247
        assert "last_updated" in data

    def test_throughput_mock_when_unconfigured(self, client):
        data = client.get("/api/v1/campaigns/camp-7/throughput").json()
        assert data["campaign_id"] == "camp-7"
        assert data["daily_limit"] == 500
        assert data["is_blocked"] is False

    def test_metrics_proxied_with_authorization(self, app, client):
        fake = _use_engine(app, FakeSalesEngine({
            "/campaigns/camp-7/metrics": (200, {"campaign_id": "camp-7", "total_leads": 3}),
        }))
        response = client.get("/api/v1/campaigns/camp-7/metrics",
                              headers={"Authorization": "Bearer tok"})
        assert response.status_code == 200
        assert response.json() == {"campaign_id": "camp-7", "total_leads": 3}
        assert fake.calls == [("/campaigns/camp-7/metrics", "Bearer tok")]

    def test_upstream_status_passed_through(self, app, client):
        _use_engine(app, FakeSalesEngine({
            "/campaigns/missing/throughput": (404, {"error": "Campaign not found"}),
        }))
        response = client.get("/api/v1/campaigns/missing/throughput")
        assert response.status_code == 404
        assert response.json() == {"error": "Campaign not found"}

    def test_proxy_failure_falls_back_to_mock(self, app, client):
        _use_engine(app, FakeSalesEngine(error=SalesEngineError("connection refused")))
        response = client.get("/api/v1/campaigns/camp-7/metrics")
        assert response.status_code == 200
        assert response.json()["total_leads"] == 1247

    def test_execution_status_idle_when_unconfigured(self, client):
        data = client.get("/api/v1/campaigns/camp-7/observability/status").json()
        assert data["status"] == "idle"
        assert data["display"]["copy"] == "Ready for execution"

    def test_execution_status_projected_from_backend(self, app, client):
        _use_engine(app, FakeSalesEngine({
            "/campaigns/camp-7/observability/status": (200, {
                "campaign_id": "camp-7",
                "status": "running",
                "current_stage": "contacts_discovered",
                "active_run_id": "a1b2c3d4e5f6",
                "last_observed_at": "2025-01-20T08:30:00Z",
            }),
        }))
        data = client.get("/api/v1/campaigns/camp-7/observability/status").json()
        assert data["display"]["copy"] == "Run in progress — Discovering contacts"
        assert data["display"]["icon"] == "running"
        assert data["active_run_label"] == "a1b2c3d4..."

    def test_execution_status_awaiting_count(self, app, client):
        _use_engine(app, FakeSalesEngine({
            "/campaigns/camp-7/observability/status": (200, {
                "status": "awaiting_approvals", "leads_awaiting_approval": 5,
            }),
        }))
        data = client.get("/api/v1/campaigns/camp-7/observability/status").json()
        assert "(5 leads)" in data["display"]["copy"]

    def test_execution_status_from_run_record_status(self, app, client):
        _use_engine(app, FakeSalesEngine({
            "/campaigns/camp-7/observability/status": (200, {
                "status": "RUNNING", "active_run_id": "0123456789ab",
            }),
        }))
        data = client.get("/api/v1/campaigns/camp-7/observability/status").json()
        assert data["status"] == "running"
        assert data["display"]["copy"] == "Run in progress"
        assert data["active_run_label"] == "01234567..."

    def test_unrecognized_status_projects_unknown(self, app, client):
        _use_engine(app, FakeSalesEngine({
            "/campaigns/camp-7/observability/status": (200, {"status": "paused"}),
        }))
        data = client.get("/api/v1/campaigns/camp-7/observability/status").json()
        assert data["status"] == "paused"
        assert data["display"]["icon"] == "unknown"

    def test_execution_status_error_body_left_alone(self, app, client):
        _use_engine(app, FakeSalesEngine({
            "/campaigns/camp-7/observability/status": (404, {"error": "Campaign not found"}),
        }))
        response = client.get("/api/v1/campaigns/camp-7/observability/status")
        assert response.status_code == 404
        assert "display" not in response.json()


class TestPortfolioProxies:

    def test_mocks_when_unconfigured(self, client):
        attention = client.get("/api/v1/campaigns/attention").json()
        assert [a["id"] for a in attention] == ["att-001", "att-002", "att-003"]

        notices = client.get("/api/v1/campaigns/notices").json()
        assert notices[0]["type"] == "info"

        readiness = client.get("/api/v1/campaigns/readiness").json()
        assert readiness["total"] == 3
        assert readiness["blockers"][0]["reason"] == "MISSING_HUMAN_APPROVAL"

        throughput = client.get("/api/v1/campaigns/throughput").json()
        assert throughput["daily_remaining"] == 373

    def test_attention_labels_governed(self, app, client):
        _use_engine(app, FakeSalesEngine({
            "/attention": (200, [
                {"id": "a", "primaryAction": {"label": "Start Run", "type": "run", "href": "/x"}},
                {"id": "b", "primaryAction": {"label": "Review Campaign", "type": "review"}},
                {"id": "c"},
            ]),
        }))
        items = client.get("/api/v1/campaigns/attention").json()
        assert items[0]["primaryAction"] == {"label": "View Observability", "type": "view", "href": "/x"}
        assert items[1]["primaryAction"]["label"] == "Review Campaign"
        assert items[1]["primaryAction"]["type"] == "view"
        assert items[2]["primaryAction"] == {"label": "View Campaign", "type": "view"}

    def test_readiness_proxy_failure_falls_back(self, app, client):
        _use_engine(app, FakeSalesEngine(error=SalesEngineError("timeout")))
        assert client.get("/api/v1/campaigns/readiness").json()["total"] == 3

    def test_notices_proxied(self, app, client):
        fake = _use_engine(app, FakeSalesEngine({"/notices": (200, [])}))
        assert client.get("/api/v1/campaigns/notices").json() == []
        assert fake.calls[0][0] == "/notices"


# =============================================================================
# BASIC AUTH GATE
# =============================================================================

class TestBasicAuth:

    def _enable(self, monkeypatch):
        monkeypatch.setenv("BASIC_AUTH_USERNAME", "ops")
        monkeypatch.setenv("BASIC_AUTH_PASSWORD", "s3cret")

    def test_fails_open_when_unconfigured(self, client, monkeypatch):
        assert client.get("/").status_code == 200
        monkeypatch.setenv("BASIC_AUTH_USERNAME", "ops")
        assert client.get("/").status_code == 200

    def test_requires_credentials_when_configured(self, client, monkeypatch):
        self._enable(monkeypatch)
        response = client.get("/")
        assert response.status_code == 401
        assert response.text == "Authentication required"
        assert response.headers["WWW-Authenticate"].startswith('Basic realm="NSD Sales Engine"')

    def test_accepts_valid_credentials(self, client, monkeypatch):
        self._enable(monkeypatch)
        token = base64.b64encode(b"ops:s3cret").decode()
        response = client.get("/", headers={"Authorization": f"Basic {token}"})
        assert response.status_code == 200
        assert response.json()["service"] == "platform-shell"

    def test_rejects_malformed_header(self, client, monkeypatch):
        self._enable(monkeypatch)
        response = client.get("/", headers={"Authorization": "Basic %%%"})
        assert response.status_code == 401

    def test_api_routes_not_gated(self, client, monkeypatch):
        self._enable(monkeypatch)
        assert client.get("/api/health").status_code == 200
        assert client.get("/api/v1/campaigns/notices").status_code == 200
