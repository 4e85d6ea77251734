import importlib

import pytest
from pydantic import ValidationError

from components.apigateway.contracts import ErrorPayload, MetaPayload, UWFResponse
from components.apigateway.errors import KIND_MAPPING, status_for
from components.apigateway.settings import APP_NAME, GatewaySettings
from components.socialcore.errors import ErrorKind, UserExists


def test_uwf_success_shape():
    resp = UWFResponse(ok=True, result={"x": 1}, error=None, meta=MetaPayload(trace_id="t", request_id="r"))
    assert resp.ok is True
    assert resp.result == {"x": 1}
    assert resp.error is None
    assert resp.meta.trace_id == "t"


def test_uwf_error_shape():
    err = ErrorPayload(type="CONFLICT", **UserExists("Handle already taken").to_payload())
    resp = UWFResponse(ok=False, result=None, error=err, meta=MetaPayload())
    assert resp.ok is False
    assert resp.error.code == "USER_EXISTS"
    assert resp.error.message == "Handle already taken"


def test_every_kind_has_a_status():
    assert set(KIND_MAPPING) == set(ErrorKind)


@pytest.mark.parametrize("kind,status", [
    (ErrorKind.VALIDATION_FAILED, 422),
    (ErrorKind.USER_EXISTS, 409),
    (ErrorKind.ALREADY_FOLLOWING, 409),
    (ErrorKind.USER_NOT_FOUND, 404),
    (ErrorKind.NOT_FOLLOWING, 404),
    (ErrorKind.INVALID_CREDENTIALS, 401),
    (ErrorKind.TOKEN_EXPIRED, 401),
    (ErrorKind.INVALID_OPERATION, 400),
    (ErrorKind.STORAGE_UNAVAILABLE, 503),
    (ErrorKind.INTERNAL, 500),
])
def test_status_for(kind, status):
    assert status_for(kind) == status


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    # no stray .env or SOCIAL_* variables from the host
    monkeypatch.chdir(tmp_path)
    for name in ("SOCIAL_DATABASE_URL", "SOCIAL_AUTH_SECRET", "SOCIAL_CORS_ORIGIN"):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


@pytest.mark.parametrize("present", [{}, {"SOCIAL_DATABASE_URL": "sqlite://"}, {"SOCIAL_AUTH_SECRET": "s"}])
def test_settings_require_secret_and_database_url(clean_env, present):
    for name, value in present.items():
        clean_env.setenv(name, value)
    with pytest.raises(ValidationError):
        GatewaySettings()


def test_settings_from_env(clean_env):
    clean_env.setenv("SOCIAL_DATABASE_URL", "sqlite://")
    clean_env.setenv("SOCIAL_AUTH_SECRET", "from-env")
    clean_env.setenv("SOCIAL_ACCESS_TTL_SECONDS", "60")
    cfg = GatewaySettings().auth_config()
    assert cfg.secret == "from-env"
    assert cfg.access_ttl_seconds == 60


def test_cors_origins_are_comma_separated(clean_env):
    settings = GatewaySettings(database_url="sqlite://", auth_secret="s", cors_origin="http://a.test, http://b.test")
    assert settings.cors_origins() == ["http://a.test", "http://b.test"]


def test_asgi_module_builds_app_from_env(clean_env):
    clean_env.setenv("SOCIAL_DATABASE_URL", "sqlite://")
    clean_env.setenv("SOCIAL_AUTH_SECRET", "from-env")
    clean_env.setenv("SOCIAL_PORT", "9001")
    asgi = importlib.import_module("components.apigateway.asgi")
    asgi = importlib.reload(asgi)
    assert asgi.app.title == APP_NAME
    assert asgi.settings.port == 9001
    assert asgi.app.state.settings.auth_secret == "from-env"
