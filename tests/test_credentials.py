"""Tests for the credential provider."""

from unittest.mock import Mock, patch

import pytest

from sheetsgate.config import Settings
from sheetsgate.errors import ConfigurationError
from sheetsgate.sheets.credentials import SCOPES, Capability, CredentialProvider


class TestLoading:
    def test_missing_key_file_fails_lazily(self, tmp_path):
        provider = CredentialProvider(key_path=tmp_path / "missing.json")

        assert provider.is_configured() is False
        with pytest.raises(ConfigurationError, match="not found"):
            _ = provider.credentials

    def test_no_key_reference(self):
        provider = CredentialProvider()

        assert provider.is_configured() is False
        with pytest.raises(ConfigurationError, match="No service account key configured"):
            _ = provider.credentials

    def test_every_call_fails_again_after_failed_load(self, tmp_path):
        provider = CredentialProvider(key_path=tmp_path / "missing.json")

        for _ in range(2):
            with pytest.raises(ConfigurationError):
                provider.acquire_handle(Capability.SPREADSHEET_VALUES)

    def test_unreadable_key_file(self, tmp_path):
        key_path = tmp_path / "sa.json"
        key_path.write_text('{"type": "service_account"}')

        provider = CredentialProvider(key_path=key_path)

        assert provider.is_configured() is True
        with pytest.raises(ConfigurationError, match="Unable to read service account key"):
            _ = provider.credentials

    def test_malformed_inline_json(self):
        provider = CredentialProvider(key_json="{not json")

        assert provider.is_configured() is True
        with pytest.raises(ConfigurationError, match="Invalid inline service account key"):
            _ = provider.credentials

    @patch("sheetsgate.sheets.credentials.service_account.Credentials.from_service_account_file")
    def test_key_file_loaded_once(self, mock_from_file, tmp_path):
        key_path = tmp_path / "sa.json"
        key_path.write_text("{}")
        mock_from_file.return_value = Mock(service_account_email="bot@p.iam.gserviceaccount.com")

        provider = CredentialProvider(key_path=key_path)
        first = provider.credentials
        second = provider.credentials

        assert first is second
        assert provider.service_account_email == "bot@p.iam.gserviceaccount.com"
        mock_from_file.assert_called_once_with(str(key_path), scopes=SCOPES)

    @patch("sheetsgate.sheets.credentials.service_account.Credentials.from_service_account_info")
    def test_inline_json_preferred_over_file(self, mock_from_info, tmp_path):
        mock_from_info.return_value = Mock()

        provider = CredentialProvider(
            key_path=tmp_path / "missing.json",
            key_json='{"type": "service_account", "client_email": "x"}',
        )
        _ = provider.credentials

        mock_from_info.assert_called_once_with(
            {"type": "service_account", "client_email": "x"}, scopes=SCOPES
        )

    def test_from_settings(self, tmp_path):
        settings = Settings(
            google_application_credentials=tmp_path / "sa.json",
            google_credentials_json=None,
        )

        provider = CredentialProvider.from_settings(settings)

        assert provider.is_configured() is False


class TestAcquireHandle:
    @pytest.mark.parametrize(
        "capability,service",
        [
            (Capability.FILE_LISTING, ("drive", "v3")),
            (Capability.SPREADSHEET_VALUES, ("sheets", "v4")),
            ("spreadsheetValues", ("sheets", "v4")),
        ],
    )
    @patch("sheetsgate.sheets.credentials.build")
    def test_builds_service_for_capability(self, mock_build, capability, service):
        creds = Mock()
        provider = CredentialProvider(key_json="{}")
        provider._credentials = creds

        handle = provider.acquire_handle(capability)

        assert handle is mock_build.return_value
        mock_build.assert_called_once_with(
            service[0], service[1], credentials=creds, cache_discovery=False
        )
