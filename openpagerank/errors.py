"""例外定義.

呼び出し側が失敗原因で分岐できるよう、種類を限定した例外階層にしている。
全て OpenPageRankError を継承し、元の例外は __cause__ に保持される。
"""


class OpenPageRankError(Exception):
    """本ライブラリが送出する例外の基底クラス."""


class CredentialError(OpenPageRankError):
    """API キーが空、またはヘッダ値として送れない文字を含む."""


class TransportError(OpenPageRankError):
    """接続失敗・DNS 解決失敗などの通信エラー."""


class RankTimeoutError(TransportError):
    """指定したタイムアウト内に応答がなかった."""


class DecodeError(OpenPageRankError):
    """レスポンスボディが JSON でない、または想定した構造でない."""


class EmptyResponseError(OpenPageRankError):
    """先頭エントリを要求したがレスポンスが空だった."""

    def __init__(self, message: str = "no response found"):
        super().__init__(message)
