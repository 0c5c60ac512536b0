# AQARA_CLIENT/core/signer.py
import time
import hashlib
import secrets
import string
from typing import Optional

NONCE_LENGTH = 16
NONCE_CHARSET = string.ascii_letters + string.digits


def make_nonce(length: int = NONCE_LENGTH) -> str:
    """英数字のランダム文字列 (呼び出しごとに新規生成)"""
    return "".join(secrets.choice(NONCE_CHARSET) for _ in range(length))


def make_timestamp() -> str:
    """現在時刻 (ミリ秒) の10進文字列"""
    return str(int(round(time.time() * 1000)))


class AqaraSigner:
    """
    Signヘッダーの値を計算する。

    署名文字列のキー順・書式はサーバー側の検証と完全一致している必要がある:
        Accesstoken=...&Appid=...&Keyid=...&Nonce=...&Time=...{appKey}
    アクセストークンが空の場合は Accesstoken 部分を省略する。
    全体を小文字化し、UTF-8のMD5を16進小文字で返す。
    """

    def __init__(self, app_id: str, key_id: str, app_key: str):
        self.app_id = app_id
        self.key_id = key_id
        self._app_key = app_key

    def signing_string(self, access_token: Optional[str], nonce: str, timestamp: str) -> str:
        s = f"Appid={self.app_id}&Keyid={self.key_id}&Nonce={nonce}&Time={timestamp}{self._app_key}"
        if access_token:
            s = f"Accesstoken={access_token}&" + s
        return s.lower()

    def sign(self, access_token: Optional[str], nonce: str, timestamp: str) -> str:
        s = self.signing_string(access_token, nonce, timestamp)
        return hashlib.md5(s.encode("utf-8")).hexdigest()

    def __repr__(self) -> str:
        return f"AqaraSigner(app_id={self.app_id!r}, key_id={self.key_id!r})"
