import pytest
from pydantic import ValidationError

from src.core.config import Settings


def test_jwt_secret_key_is_required(monkeypatch):
    monkeypatch.delenv("JWT_SECRET_KEY", raising=False)

    with pytest.raises(ValidationError) as e:
        Settings(_env_file=None)

    assert "JWT_SECRET_KEY" in str(e.value)


def test_jwt_secret_key_from_env(monkeypatch):
    monkeypatch.setenv("JWT_SECRET_KEY", "from-env")

    assert Settings(_env_file=None).JWT_SECRET_KEY == "from-env"


def test_database_url_wins_over_parts():
    settings = Settings(_env_file=None, JWT_SECRET_KEY="key", DATABASE_URL="sqlite://", DB_HOST="db")

    assert settings.db_conn_url == "sqlite://"
