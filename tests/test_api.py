"""
Tests for the TrustScore HTTP API.

The engine dependency is overridden with a mock; no provider calls are made.
"""

import pytest
from fastapi.testclient import TestClient
from unittest.mock import Mock, patch

from trustscore.api.main import app, get_engine
from trustscore.data.config import reset_settings
from trustscore.data.data_models import TrustScoreResult
from trustscore.data.errors import (
    BusinessUnitNotFoundError,
    FetchError,
    InsufficientDataError,
    MissingCredentialsError,
    ResolutionError,
)


RESULT = TrustScoreResult(id="bu1", domain="example.com", trust_score=8.3)


@pytest.fixture
def engine():
    engine = Mock()
    app.dependency_overrides[get_engine] = lambda: engine
    yield engine
    app.dependency_overrides.clear()


@pytest.fixture
def client():
    return TestClient(app)


class TestTrustScoreEndpoints:
    """Tests for the trust score routes."""

    def test_score_by_domain(self, client, engine):
        engine.get_trust_score.return_value = RESULT

        response = client.get("/api/trust-score", params={"domain": "example.com"})

        assert response.status_code == 200
        assert response.json() == {"id": "bu1", "domain": "example.com", "trustScore": 8.3}
        engine.get_trust_score.assert_called_once_with(domain="example.com")

    def test_score_by_id(self, client, engine):
        engine.get_trust_score.return_value = RESULT

        response = client.get("/api/trust-score/business-units/bu1")

        assert response.status_code == 200
        assert response.json()["trustScore"] == 8.3
        engine.get_trust_score.assert_called_once_with(business_unit_id="bu1")

    def test_domain_required(self, client, engine):
        assert client.get("/api/trust-score").status_code == 422
        assert client.get("/api/trust-score", params={"domain": ""}).status_code == 422
        engine.get_trust_score.assert_not_called()

    @pytest.mark.parametrize("error,status", [
        (BusinessUnitNotFoundError("No business unit found for 'nope.example'"), 404),
        (ResolutionError("Business unit lookup failed"), 502),
        (FetchError("Review page 2 failed", page=2), 502),
        (InsufficientDataError("No reviews to score"), 422),
    ])
    def test_error_mapping(self, client, engine, error, status):
        engine.get_trust_score.side_effect = error

        response = client.get("/api/trust-score", params={"domain": "nope.example"})

        assert response.status_code == status
        assert response.json()["detail"] == str(error)


class TestHealth:
    """Tests for /api/health."""

    def setup_method(self):
        reset_settings()

    def teardown_method(self):
        reset_settings()

    @patch.dict("os.environ", {"TRUSTPILOT_API_KEY": "k", "TRUSTSCORE_REVIEW_CAP": "300"})
    def test_health(self, client):
        response = client.get("/api/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "ok"
        assert body["provider_configured"] is True
        assert body["review_cap"] == 300


@patch("trustscore.api.main.build_engine")
def test_missing_credentials_is_503(mock_build, client):
    mock_build.side_effect = MissingCredentialsError("TRUSTPILOT_API_KEY is not set")

    response = client.get("/api/trust-score", params={"domain": "example.com"})

    assert response.status_code == 503
