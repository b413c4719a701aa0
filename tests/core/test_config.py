import pytest
from pydantic import ValidationError as SettingsError

from app.core.config import Settings


class TestRequiredSecrets:

    @pytest.mark.parametrize("missing", ["JWT_SECRET", "ADMIN_PASSWORD"])
    def test_missing_secret_fails_startup(self, monkeypatch, missing):
        monkeypatch.delenv(missing, raising=False)
        with pytest.raises(SettingsError, match=missing):
            Settings(_env_file=None)

    def test_secrets_read_from_environment(self, monkeypatch):
        monkeypatch.setenv("JWT_SECRET", "s3cret")
        monkeypatch.setenv("ADMIN_PASSWORD", "hunter2")
        config = Settings(_env_file=None)
        assert config.JWT_SECRET == "s3cret"
        assert config.ADMIN_PASSWORD == "hunter2"
