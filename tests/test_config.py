"""config モジュールのテスト."""

import importlib
import os

import openpagerank.config
from openpagerank.client import RankClient
from openpagerank.config import get_api_key, insecure_tls_enabled


class TestGetApiKey:
    def test_set(self, monkeypatch):
        monkeypatch.setenv("OPR_API_KEY", "secret")
        assert get_api_key() == "secret"

    def test_empty_is_none(self, monkeypatch):
        monkeypatch.setenv("OPR_API_KEY", "")
        assert get_api_key() is None

    def test_unset(self, monkeypatch):
        monkeypatch.delenv("OPR_API_KEY", raising=False)
        assert get_api_key() is None


class TestInsecureTlsEnabled:
    def test_default_off(self, monkeypatch):
        monkeypatch.delenv("OPR_INSECURE_TLS", raising=False)
        assert insecure_tls_enabled() is False

    def test_truthy(self, monkeypatch):
        monkeypatch.setenv("OPR_INSECURE_TLS", " True ")
        assert insecure_tls_enabled() is True

    def test_falsy(self, monkeypatch):
        monkeypatch.setenv("OPR_INSECURE_TLS", "0")
        assert insecure_tls_enabled() is False


class TestImportSideEffects:
    """ライブラリの import が .env を読み込まないことのテスト."""

    def test_import_ignores_env_file(self, monkeypatch, tmp_path):
        (tmp_path / ".env").write_text(
            "OPR_INSECURE_TLS=1\nOPR_API_KEY=from-dotenv\n", encoding="utf-8"
        )
        monkeypatch.chdir(tmp_path)
        for name in ("OPR_INSECURE_TLS", "OPR_API_KEY"):
            # setenv で元の状態を記録してから消す
            monkeypatch.setenv(name, "")
            monkeypatch.delenv(name)

        importlib.reload(openpagerank.config)

        assert "OPR_INSECURE_TLS" not in os.environ
        assert "OPR_API_KEY" not in os.environ
        assert RankClient().insecure is False
