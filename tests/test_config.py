import pytest
from pydantic import ValidationError

from vaidya.core.config import Settings


@pytest.mark.unit
def test_defaults(monkeypatch):
    """Test the development defaults"""
    monkeypatch.delenv("DATABASE_URL", raising=False)
    monkeypatch.delenv("PRESCRIPTION_UPDATE_POLICY", raising=False)
    config = Settings(_env_file=None)

    assert config.DATABASE_URL == "sqlite:///./vaidya.db"
    assert config.PRESCRIPTION_UPDATE_POLICY == "legacy"


@pytest.mark.unit
def test_postgres_url_assembled(monkeypatch):
    """Test the URL is built from the POSTGRES_* settings"""
    monkeypatch.delenv("DATABASE_URL", raising=False)
    config = Settings(
        _env_file=None,
        POSTGRES_SERVER="db",
        POSTGRES_USER="vaidya",
        POSTGRES_PASSWORD="secret",
        POSTGRES_DB="clinic",
    )

    assert config.DATABASE_URL == "postgresql://vaidya:secret@db:5432/clinic"


@pytest.mark.unit
def test_legacy_postgres_scheme_normalised():
    """Test postgres:// URLs are rewritten"""
    config = Settings(_env_file=None, DATABASE_URL="postgres://u:p@host/db")
    assert config.DATABASE_URL == "postgresql://u:p@host/db"


@pytest.mark.unit
def test_update_policy_validated():
    """Test the update policy accepts only known values"""
    assert Settings(_env_file=None, PRESCRIPTION_UPDATE_POLICY="STRICT").PRESCRIPTION_UPDATE_POLICY == "strict"
    with pytest.raises(ValidationError):
        Settings(_env_file=None, PRESCRIPTION_UPDATE_POLICY="lenient")
