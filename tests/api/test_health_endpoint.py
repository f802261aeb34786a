"""
Tests for health check endpoints.

Tests GET /api/v1/health and GET /api/v1/health/db, including the
unhealthy response when a model's database cannot be reached.

Dependencies: pytest, fastapi, httpx, schema_model.api
System role: Health API verification
"""

from unittest.mock import patch

from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError

from schema_model.api import create_app
from schema_model.boundary.db import Storage


class TestHealthEndpoints:
    def test_health(self, film_model):
        # Arrange
        client = TestClient(create_app([film_model]))

        # Act
        response = client.get("/api/v1/health")

        # Assert
        assert response.status_code == 200
        assert response.json() == {"status": "healthy", "message": "Server Healthy"}

    def test_database_health(self, film_model):
        """Test every registered model is pinged."""
        # Arrange
        client = TestClient(create_app([film_model]))

        # Act
        response = client.get("/api/v1/health/db")

        # Assert
        assert response.status_code == 200
        assert response.json() == {
            "status": "healthy",
            "message": "Database connection OK",
            "models": {"FilmDB": "ok"},
        }

    def test_database_unavailable(self, film_model):
        """Test a failing ping yields 503 with the model marked unavailable."""
        # Arrange
        client = TestClient(create_app([film_model]))
        error = OperationalError("SELECT 1", {}, Exception("unable to open database file"))

        # Act
        with patch.object(Storage, "ping", side_effect=error):
            response = client.get("/api/v1/health/db")

        # Assert
        assert response.status_code == 503
        body = response.json()
        assert body["status"] == "unhealthy"
        assert body["models"] == {"FilmDB": "unavailable"}

    def test_no_models_is_healthy(self):
        client = TestClient(create_app())

        response = client.get("/api/v1/health/db")

        assert response.json()["models"] == {}
