"""設定モジュール — 環境変数・定数定義."""

import os

# --- Open PageRank API ---
API_ROOT = "https://openpagerank.com/api/v1.0/getPageRank"
API_KEY_HEADER = "API-OPR"
DOMAINS_PARAM = "domains[]"

# --- 環境変数名 ---
API_KEY_ENV = "OPR_API_KEY"
INSECURE_TLS_ENV = "OPR_INSECURE_TLS"

# --- リクエスト設定 ---
DEFAULT_TIMEOUT = 10.0  # 秒

# --- ログ ---
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def get_api_key() -> str | None:
    """環境変数から API キーを取得する. 未設定・空文字なら None."""
    return os.getenv(API_KEY_ENV) or None


def insecure_tls_enabled() -> bool:
    """証明書検証を無効化する設定が有効か."""
    return os.getenv(INSECURE_TLS_ENV, "").strip().lower() in {"1", "true", "yes", "on"}
