# =============================================================================
# tests/test_config.py - Settings Tests
# =============================================================================

import pytest
from pydantic import ValidationError


class TestSessionSettings:
    """Cookie attributes derived from ENVIRONMENT."""

    def test_defaults(self, make_settings):
        settings = make_settings()

        assert settings.SESSION_COOKIE_NAME == "sessionID"
        assert settings.SESSION_MAX_AGE_MS == 7_200_000
        assert settings.session_max_age_seconds == 7200
        assert settings.SESSION_PURGE_INTERVAL_S == 900

    def test_cookie_not_secure_in_development(self, make_settings):
        assert make_settings(ENVIRONMENT="development").session_cookie_secure is False

    @pytest.mark.parametrize("environment", ["test", "staging", "production"])
    def test_cookie_secure_otherwise(self, make_settings, environment):
        assert make_settings(ENVIRONMENT=environment).session_cookie_secure is True

    def test_unknown_environment_rejected(self, make_settings):
        with pytest.raises(ValidationError):
            make_settings(ENVIRONMENT="qa")

    def test_environment_flags(self, make_settings):
        settings = make_settings(ENVIRONMENT="production")

        assert not settings.is_development
        assert not settings.is_test
        assert not hasattr(settings, "is_production")


class TestParsedLists:
    def test_allowed_extensions_are_normalised(self, make_settings):
        settings = make_settings(ALLOWED_EXTENSIONS=" .PNG, .jpg ,,")

        assert settings.allowed_extensions_list == [".png", ".jpg"]

    def test_forwarded_allow_ips(self, make_settings):
        settings = make_settings(FORWARDED_ALLOW_IPS="10.0.0.1, 10.0.0.2")

        assert settings.forwarded_allow_ips_list == ["10.0.0.1", "10.0.0.2"]

    def test_max_upload_size_bytes(self, make_settings):
        assert make_settings(MAX_UPLOAD_SIZE_MB=2).max_upload_size_bytes == 2 * 1024 * 1024

    def test_version_prefix_must_start_with_slash(self, make_settings):
        with pytest.raises(ValidationError):
            make_settings(API_VERSION_PREFIX="v1")
