"""データモデル定義.

API のフィールド名 (page_rank_integer など) と属性名の対応は from_dict / to_dict に閉じ込める。
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any

from openpagerank.errors import DecodeError, EmptyResponseError


def normalize_domain(domain: object) -> str:
    """末尾の "/" を全て取り除く.

    API は末尾スラッシュ付きの URL を受け付けないため。
    小文字化やホスト部の抽出は行わない（サービス側で処理される）。
    """
    return str(domain).rstrip("/")


def _require(data: Any, key: str) -> Any:
    if not isinstance(data, dict):
        raise DecodeError(f"JSON オブジェクトではありません: {type(data).__name__}")
    if key not in data:
        raise DecodeError(f"必須フィールドがありません: {key}")
    return data[key]


def _non_negative_int(value: Any, key: str) -> int:
    """0 以上の整数であることを検証する. bool と小数は不可."""
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise DecodeError(f"{key} は 0 以上の整数である必要があります: {value!r}")
    return value


def _loads(text: str | bytes) -> Any:
    try:
        return json.loads(text)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise DecodeError(f"JSON パースエラー: {e}") from e


@dataclass(frozen=True)
class RankEntry:
    """1ドメイン分の順位情報."""

    status_code: int
    error: str  # エラーなしなら空文字
    rank_integer: int  # 0〜10 の整数スコア
    rank_decimal: float
    rank: str | None  # None = 順位データなし
    domain: str  # サービス側で正規化されたドメイン

    @property
    def is_ranked(self) -> bool:
        return self.rank is not None

    @classmethod
    def from_dict(cls, data: Any) -> RankEntry:
        status_code = _require(data, "status_code")
        domain = _require(data, "domain")
        if not isinstance(domain, str):
            raise DecodeError(f"domain が文字列ではありません: {domain!r}")
        rank = data.get("rank")
        rank_integer = data.get("page_rank_integer")
        if rank_integer is None:
            rank_integer = 0
        else:
            rank_integer = _non_negative_int(rank_integer, "page_rank_integer")
        try:
            return cls(
                status_code=int(status_code),
                error=str(data.get("error") or ""),
                rank_integer=rank_integer,
                rank_decimal=float(data.get("page_rank_decimal") or 0.0),
                rank=None if rank is None else str(rank),
                domain=domain,
            )
        except (TypeError, ValueError) as e:
            raise DecodeError(f"不正なフィールド値: domain={domain}, error={e}") from e

    def to_dict(self) -> dict[str, Any]:
        return {
            "status_code": self.status_code,
            "error": self.error,
            "page_rank_integer": self.rank_integer,
            "page_rank_decimal": self.rank_decimal,
            "rank": self.rank,
            "domain": self.domain,
        }


@dataclass(frozen=True)
class RankBatchResult:
    """getPageRank のレスポンス全体.

    responses の順序はリクエストしたドメインの順序と一致する（サービス依存、ここでは検証しない）。
    """

    status_code: int
    responses: tuple[RankEntry, ...]
    last_updated: str  # サービスが返す文字列のまま保持

    @classmethod
    def from_dict(cls, data: Any) -> RankBatchResult:
        status_code = _require(data, "status_code")
        raw_responses = _require(data, "response")
        last_updated = _require(data, "last_updated")
        if not isinstance(raw_responses, list):
            raise DecodeError(f"response が配列ではありません: {type(raw_responses).__name__}")
        try:
            status_code = int(status_code)
        except (TypeError, ValueError) as e:
            raise DecodeError(f"不正な status_code: {status_code!r}") from e
        return cls(
            status_code=status_code,
            responses=tuple(RankEntry.from_dict(r) for r in raw_responses),
            last_updated=str(last_updated),
        )

    @classmethod
    def from_json(cls, text: str | bytes) -> RankBatchResult:
        return cls.from_dict(_loads(text))

    def to_dict(self) -> dict[str, Any]:
        return {
            "status_code": self.status_code,
            "response": [r.to_dict() for r in self.responses],
            "last_updated": self.last_updated,
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False)

    def get_responses(self) -> list[RankEntry]:
        """エントリのリストをコピーして返す."""
        return list(self.responses)

    def find(self, domain: object) -> RankEntry | None:
        """指定ドメインのエントリを返す. 見つからなければ None."""
        target = normalize_domain(domain)
        for r in self.responses:
            if r.domain == target:
                return r
        return None

    def first(self) -> RankFirstResult:
        return RankFirstResult.from_batch(self)


@dataclass(frozen=True)
class RankFirstResult:
    """RankBatchResult の先頭エントリだけを取り出したもの."""

    status_code: int
    response: RankEntry
    last_updated: str

    @classmethod
    def from_batch(cls, batch: RankBatchResult) -> RankFirstResult:
        """先頭エントリから生成する.

        Raises:
            EmptyResponseError: responses が空の場合
        """
        if not batch.responses:
            raise EmptyResponseError()
        return cls(
            status_code=batch.status_code,
            response=batch.responses[0],
            last_updated=batch.last_updated,
        )

    @classmethod
    def from_dict(cls, data: Any) -> RankFirstResult:
        status_code = _require(data, "status_code")
        response = RankEntry.from_dict(_require(data, "response"))
        last_updated = _require(data, "last_updated")
        try:
            status_code = int(status_code)
        except (TypeError, ValueError) as e:
            raise DecodeError(f"不正な status_code: {status_code!r}") from e
        return cls(
            status_code=status_code,
            response=response,
            last_updated=str(last_updated),
        )

    @classmethod
    def from_json(cls, text: str | bytes) -> RankFirstResult:
        return cls.from_dict(_loads(text))

    def to_dict(self) -> dict[str, Any]:
        return {
            "status_code": self.status_code,
            "response": self.response.to_dict(),
            "last_updated": self.last_updated,
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False)
