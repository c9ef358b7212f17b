from app.core.config import Settings


def test_defaults(monkeypatch):
    for name in ("DATABASE_URL", "CORS_ORIGINS", "NEARBY_LIMIT", "DEFAULT_RADIUS_METERS"):
        monkeypatch.delenv(name, raising=False)
    settings = Settings(_env_file=None)
    assert settings.DATABASE_URL == "sqlite:///./civictrack.db"
    assert settings.API_V1_PREFIX == "/api/v1"
    assert settings.DEFAULT_RADIUS_METERS == 5000
    assert settings.NEARBY_LIMIT == 20
    assert settings.CORS_ORIGINS == ["*"]


def test_cors_origins_from_comma_list(monkeypatch):
    monkeypatch.setenv("CORS_ORIGINS", "http://a.example.com, http://b.example.com")
    settings = Settings(_env_file=None)
    assert settings.CORS_ORIGINS == ["http://a.example.com", "http://b.example.com"]
