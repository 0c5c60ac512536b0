# AQARA_CLIENT/services/aqara_service.py
import json
import threading
from typing import Dict, Optional, Type, TypeVar

import requests
from pydantic import BaseModel, ValidationError

import config
from core.errors import AqaraProtocolError, AqaraSerializationError, AqaraTransportError, AqaraVendorError
from core.logger import setup_logging
from core.network import create_session
from core.signer import AqaraSigner, make_nonce, make_timestamp
from models.aqara import (
    AqaraRegion,
    AqaraRequest,
    AqaraResponse,
    AuthCodeData,
    DeviceListResult,
    DeviceQueryData,
    RefreshTokenData,
    SessionState,
    TokenData,
    TokenResult,
)

logger = setup_logging("service.aqara")

M = TypeVar("M", bound=BaseModel)

INTENT_GET_AUTH_CODE = "config.auth.getAuthCode"
INTENT_GET_TOKEN = "config.auth.getToken"
INTENT_REFRESH_TOKEN = "config.auth.refreshToken"
INTENT_QUERY_DEVICE_INFO = "query.device.info"


def decode_result(response: AqaraResponse, model: Type[M]) -> M:
    """code == 0 を確認済みのレスポンスから result を intent 固有の型に変換する"""
    if not isinstance(response.result, dict):
        raise AqaraProtocolError(f"result is not an object: {type(response.result).__name__}")
    try:
        return model(**response.result)
    except ValidationError as e:
        raise AqaraProtocolError(f"unexpected result for {model.__name__}: {e}") from e


class AqaraClient:
    """
    Aqara Open API (v3.0) クライアント。

    1回の操作につき1回だけリクエストを送り、レスポンスまでブロックする。
    自動リトライはしない (core.network.retry_api_call を呼び出し側で使う)。
    """

    def __init__(
        self,
        region: AqaraRegion,
        app_id: str,
        key_id: str,
        app_key: str,
        account: str,
        debug: bool = False,
        timeout: float = config.HTTP_TIMEOUT,
        session: Optional[requests.Session] = None,
    ):
        self._region = AqaraRegion(region)
        self.app_id = app_id
        self.key_id = key_id
        self.account = account
        self.debug = debug
        self.timeout = timeout
        self._signer = AqaraSigner(app_id, key_id, app_key)
        self._http = session or create_session()
        # ログイン後に更新される
        self._state = SessionState()
        self._state_lock = threading.Lock()

    @property
    def region(self) -> AqaraRegion:
        return self._region

    @property
    def url(self) -> str:
        return f"https://{self._region.value}{config.AQARA_API_PATH}"

    @property
    def session_state(self) -> SessionState:
        with self._state_lock:
            return self._state

    def _swap_tokens(self, access_token: str, refresh_token: str) -> None:
        new_state = SessionState(access_token=access_token, refresh_token=refresh_token)
        with self._state_lock:
            self._state = new_state

    # --- 操作 ---

    def request_auth_code(self) -> AqaraResponse:
        """アカウント宛に認証コード (SMS/メール) を送ってもらう"""
        request = AqaraRequest(
            intent=INTENT_GET_AUTH_CODE,
            data=AuthCodeData(account=self.account).model_dump(),
        )
        try:
            response = self.call(request, authenticated=False)
        except Exception as e:
            logger.error(f"Failed to do auth request: {e}")
            raise
        logger.info(f"Authorization code requested for {self.account}")
        return response

    def exchange_token(self, auth_code: str) -> TokenResult:
        """認証コードをアクセストークン/リフレッシュトークンに交換する。失敗時はセッションを変更しない"""
        request = AqaraRequest(
            intent=INTENT_GET_TOKEN,
            data=TokenData(authCode=auth_code, account=self.account).model_dump(),
        )
        try:
            response = self.call(request, authenticated=False)
            result = decode_result(response, TokenResult)
        except Exception as e:
            logger.error(f"Failed to do token request: {e}")
            raise

        self._swap_tokens(result.accessToken, result.refreshToken)
        logger.info("Login successful, updating account information")
        return result

    def refresh_access_token(self) -> TokenResult:
        """保持しているリフレッシュトークンでトークンの組を更新する"""
        request = AqaraRequest(
            intent=INTENT_REFRESH_TOKEN,
            data=RefreshTokenData(refreshToken=self.session_state.refresh_token).model_dump(),
        )
        try:
            response = self.call(request, authenticated=False)
            result = decode_result(response, TokenResult)
        except Exception as e:
            logger.error(f"Failed to refresh token: {e}")
            raise

        self._swap_tokens(result.accessToken, result.refreshToken)
        logger.info("Access token refreshed")
        return result

    def list_devices(self) -> DeviceListResult:
        """アカウントのデバイス一覧 (1ページ目、最大100件)"""
        request = AqaraRequest(
            intent=INTENT_QUERY_DEVICE_INFO,
            data=DeviceQueryData(pageSize=config.DEVICE_PAGE_SIZE).model_dump(),
        )
        try:
            response = self.call(request, authenticated=True)
            result = decode_result(response, DeviceListResult)
        except Exception as e:
            logger.error(f"Failed query devices: {e}")
            raise

        logger.info(f"Number of devices received: {result.totalCount}")
        return result

    # --- 共通処理 ---

    def build_headers(self, nonce: str, timestamp: str, authenticated: bool) -> Dict[str, str]:
        access_token = self.session_state.access_token if authenticated else ""
        headers = {
            "Content-Type": "application/json",
            "Appid": self.app_id,
            "Keyid": self.key_id,
            "Nonce": nonce,
            "Time": timestamp,
            "Sign": self._signer.sign(access_token, nonce, timestamp),
            "Lang": config.AQARA_LANG,
        }
        if authenticated:
            headers["Accesstoken"] = access_token
        return headers

    def call(self, request: AqaraRequest, authenticated: bool = False) -> AqaraResponse:
        """
        署名付きでAPIを呼び出し、code == 0 のレスポンスを返す。
        result はまだデコードしない (decode_result を使う)。
        """
        try:
            body = json.dumps(request.model_dump(), ensure_ascii=False)
        except (TypeError, ValueError) as e:
            raise AqaraSerializationError(f"Failed to marshal request {request.intent}: {e}") from e

        nonce = make_nonce()
        timestamp = make_timestamp()
        headers = self.build_headers(nonce, timestamp, authenticated)

        try:
            res = self._http.post(self.url, data=body.encode("utf-8"), headers=headers, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            logger.warning(f"⚠️ Network Issue [{request.intent}]: {e}")
            raise AqaraTransportError(f"Failed to do request: {e}", cause=e) from e

        if res.status_code != 200:
            logger.warning(f"Status {res.status_code} received from {self.url}")
            raise AqaraTransportError(f"Failed to do request: {res.status_code}", status_code=res.status_code)

        logger.info(f"Call to {self.url!r} successful ({request.intent})")
        if self.debug:
            logger.info(f"**DEBUG**: {res.text}")

        try:
            raw = res.json()
        except ValueError as e:
            raise AqaraProtocolError(f"Failed to unmarshal response: {e}") from e
        if not isinstance(raw, dict):
            raise AqaraProtocolError(f"Failed to unmarshal response: expected object, got {type(raw).__name__}")
        try:
            response = AqaraResponse(**raw)
        except ValidationError as e:
            raise AqaraProtocolError(f"Failed to unmarshal response: {e}") from e

        if response.code != 0:
            logger.warning(f"Aqara response with code {response.code} received with message {response.messageDetail}")
            raise AqaraVendorError(
                code=response.code,
                message=response.message,
                message_detail=response.messageDetail,
                request_id=response.requestId,
            )

        return response
