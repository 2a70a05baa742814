"""Open PageRank API クライアント."""

from openpagerank.client import RankClient, arank, build_query, normalize_domain, rank
from openpagerank.errors import (
    CredentialError,
    DecodeError,
    EmptyResponseError,
    OpenPageRankError,
    RankTimeoutError,
    TransportError,
)
from openpagerank.models import RankBatchResult, RankEntry, RankFirstResult

__all__ = [
    "CredentialError",
    "DecodeError",
    "EmptyResponseError",
    "OpenPageRankError",
    "RankBatchResult",
    "RankClient",
    "RankEntry",
    "RankFirstResult",
    "RankTimeoutError",
    "TransportError",
    "arank",
    "build_query",
    "normalize_domain",
    "rank",
]
