"""Open PageRank 順位取得 — コマンドラインエントリーポイント.

処理フロー:
  1. 環境変数（または .env）から API キーを取得
  2. 引数のドメインをまとめて 1 リクエストで照会
  3. 結果を JSON で標準出力へ書き出す
"""

from __future__ import annotations

import argparse
import logging
import sys

from dotenv import find_dotenv, load_dotenv

from openpagerank.client import RankClient
from openpagerank.config import API_KEY_ENV, DEFAULT_TIMEOUT, LOG_FORMAT, get_api_key
from openpagerank.errors import OpenPageRankError


def setup_logging(verbose: bool = False) -> None:
    """ロギングの初期設定. 標準出力は結果用に空けておく."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stderr)],
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="openpagerank",
        description="Open PageRank API でドメインの順位を取得する",
    )
    parser.add_argument("domains", nargs="+", help="ドメイン名または URL")
    parser.add_argument(
        "--timeout", type=float, default=DEFAULT_TIMEOUT,
        help=f"タイムアウト秒数 (既定: {DEFAULT_TIMEOUT})",
    )
    parser.add_argument("--first", action="store_true", help="先頭の結果のみ出力する")
    parser.add_argument(
        "--insecure", action="store_true", default=None,
        help="TLS 証明書検証を無効化する",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="デバッグログを出力する")
    return parser


def run(argv: list[str] | None = None) -> int:
    """メイン処理. 終了コードを返す."""
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)
    logger = logging.getLogger(__name__)

    load_dotenv(find_dotenv(usecwd=True))
    api_key = get_api_key()
    if api_key is None:
        logger.error("API キーが設定されていません。環境変数 %s を設定してください。", API_KEY_ENV)
        return 2

    logger.info("順位取得 開始: %d ドメイン", len(args.domains))
    try:
        result = RankClient(insecure=args.insecure).rank(args.domains, api_key, args.timeout)
        output = result.first().to_json() if args.first else result.to_json()
    except OpenPageRankError as e:
        logger.error("順位取得失敗: %s", e)
        return 1

    sys.stdout.write(output + "\n")
    ranked = sum(1 for r in result.responses if r.is_ranked)
    logger.info("順位取得 完了: 順位あり %d / %d 件, last_updated=%s",
                ranked, len(result.responses), result.last_updated)
    return 0


def main() -> None:
    sys.exit(run())


if __name__ == "__main__":
    main()
