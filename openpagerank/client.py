"""Open PageRank API クライアント.

処理フロー:
  1. ドメイン末尾の "/" を除去
  2. API-OPR ヘッダに API キーを載せ、domains[] を繰り返しクエリに並べて GET
  3. JSON ボディを RankBatchResult にデコード

リトライ・キャッシュは行わない。1 回の呼び出しで 1 リクエストのみ送信する。
timeout は接続からボディ読み込み完了までの呼び出し全体の上限。
"""

from __future__ import annotations

import asyncio
import concurrent.futures
import logging
import time
from datetime import timedelta
from typing import Iterable

import requests
from urllib3.exceptions import ReadTimeoutError

from openpagerank.config import (
    API_KEY_HEADER,
    API_ROOT,
    DEFAULT_TIMEOUT,
    DOMAINS_PARAM,
    insecure_tls_enabled,
)
from openpagerank.errors import (
    CredentialError,
    DecodeError,
    RankTimeoutError,
    TransportError,
)
from openpagerank.models import RankBatchResult, normalize_domain

logger = logging.getLogger(__name__)

Timeout = float | timedelta

_CHUNK_SIZE = 8192


def build_query(domains: Iterable[object]) -> list[tuple[str, str]]:
    """domains[] を繰り返すクエリパラメータを入力順で組み立てる."""
    return [(DOMAINS_PARAM, normalize_domain(d)) for d in domains]


def _check_api_key(api_key: str) -> None:
    """API キーがヘッダ値として送れるか検証する.

    Raises:
        CredentialError: 空文字、または可視 ASCII とタブ以外の文字を含む場合
    """
    if not isinstance(api_key, str) or not api_key:
        raise CredentialError("API キーが空です")
    for c in api_key:
        if c != "\t" and not " " <= c <= "~":
            raise CredentialError(
                f"API キーにヘッダ値として使用できない文字が含まれています: {c!r}"
            )


def _to_seconds(timeout: Timeout) -> float:
    if isinstance(timeout, timedelta):
        seconds = timeout.total_seconds()
    else:
        seconds = float(timeout)
    if seconds <= 0:
        raise ValueError(f"timeout は正の値を指定してください: {timeout!r}")
    return seconds


def _remaining(deadline: float) -> float:
    """期限までの残り秒数. 期限切れなら requests.Timeout."""
    remaining = deadline - time.monotonic()
    if remaining <= 0:
        raise requests.Timeout("呼び出し全体の期限を超過しました")
    return remaining


def _new_session(api_key: str, verify: bool) -> requests.Session:
    """呼び出しごとの使い捨てセッションを作る."""
    session = requests.Session()
    session.headers[API_KEY_HEADER] = api_key
    session.verify = verify
    return session


def _fetch(
    api_key: str, verify: bool, params: list[tuple[str, str]], deadline: float
) -> tuple[int, bytes]:
    """1 リクエストを送り、(HTTP ステータス, ボディ) を返す.

    接続・各読み込みには期限までの残り時間だけを与え、チャンクごとに期限を確認する。
    """
    with _new_session(api_key, verify=verify) as session:
        with session.get(
            API_ROOT, params=params, timeout=_remaining(deadline), stream=True
        ) as resp:
            chunks: list[bytes] = []
            try:
                for chunk in resp.iter_content(chunk_size=_CHUNK_SIZE):
                    chunks.append(chunk)
                    _remaining(deadline)
            except requests.ConnectionError as e:
                # iter_content は読み込みタイムアウトを ConnectionError に包んで送出する
                if e.args and isinstance(e.args[0], ReadTimeoutError):
                    raise requests.ReadTimeout(e) from e
                raise
            return resp.status_code, b"".join(chunks)


class RankClient:
    """Open PageRank API のクライアント.

    状態は TLS 検証の設定のみ。呼び出し間で接続やセッションは共有しない。

    Args:
        insecure: True なら証明書検証を無効化する。
            None の場合は環境変数 OPR_INSECURE_TLS に従う（既定は検証あり）。
    """

    def __init__(self, insecure: bool | None = None):
        self.insecure = insecure_tls_enabled() if insecure is None else insecure

    def rank(
        self,
        domains: Iterable[object],
        api_key: str,
        timeout: Timeout = DEFAULT_TIMEOUT,
    ) -> RankBatchResult:
        """ドメインの順位をまとめて取得する.

        Args:
            domains: ドメイン名または str() でドメイン/URL になる値
            api_key: Open PageRank の API キー
            timeout: 秒数または timedelta。呼び出し全体の上限

        Returns:
            RankBatchResult。順位のないドメインも成功として rank=None で返る。

        Raises:
            CredentialError: API キーが不正
            RankTimeoutError: タイムアウト
            TransportError: その他の通信エラー
            DecodeError: レスポンスが想定した JSON でない
        """
        _check_api_key(api_key)
        seconds = _to_seconds(timeout)
        params = build_query(domains)

        if self.insecure:
            logger.warning("TLS 証明書検証を無効化してリクエストします: %s", API_ROOT)
        logger.debug("順位取得リクエスト: domains=%d 件, timeout=%.1f 秒", len(params), seconds)

        deadline = time.monotonic() + seconds
        # 期限を過ぎたらワーカーの完了を待たずに戻る
        executor = concurrent.futures.ThreadPoolExecutor(max_workers=1)
        try:
            future = executor.submit(_fetch, api_key, not self.insecure, params, deadline)
            status_code, body = future.result(timeout=seconds)
        except concurrent.futures.TimeoutError as e:
            raise RankTimeoutError(f"タイムアウト ({seconds:.1f} 秒)") from e
        except requests.Timeout as e:
            raise RankTimeoutError(f"タイムアウト ({seconds:.1f} 秒): {e}") from e
        except requests.RequestException as e:
            raise TransportError(f"リクエスト失敗: {e}") from e
        finally:
            executor.shutdown(wait=False)

        try:
            result = RankBatchResult.from_json(body)
        except DecodeError as e:
            raise DecodeError(f"レスポンスのデコード失敗: http_status={status_code}, {e}") from e

        logger.debug(
            "順位取得レスポンス: status_code=%d, entries=%d 件",
            result.status_code, len(result.responses),
        )
        return result

    async def arank(
        self,
        domains: Iterable[object],
        api_key: str,
        timeout: Timeout = DEFAULT_TIMEOUT,
    ) -> RankBatchResult:
        """rank() の非同期版. 通信はワーカースレッドで行う."""
        seconds = _to_seconds(timeout)
        # ジェネレータをスレッド側で消費させないよう先に確定させる
        domains = list(domains)
        try:
            return await asyncio.wait_for(
                asyncio.to_thread(self.rank, domains, api_key, timeout), seconds
            )
        except asyncio.TimeoutError as e:
            raise RankTimeoutError(f"タイムアウト ({seconds:.1f} 秒)") from e


def rank(
    domains: Iterable[object],
    api_key: str,
    timeout: Timeout = DEFAULT_TIMEOUT,
    *,
    insecure: bool | None = None,
) -> RankBatchResult:
    """RankClient(insecure).rank() のショートカット."""
    return RankClient(insecure=insecure).rank(domains, api_key, timeout)


async def arank(
    domains: Iterable[object],
    api_key: str,
    timeout: Timeout = DEFAULT_TIMEOUT,
    *,
    insecure: bool | None = None,
) -> RankBatchResult:
    """RankClient(insecure).arank() のショートカット."""
    return await RankClient(insecure=insecure).arank(domains, api_key, timeout)
