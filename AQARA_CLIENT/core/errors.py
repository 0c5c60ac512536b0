# AQARA_CLIENT/core/errors.py
from typing import Any, Dict, Optional


class AqaraError(Exception):
    """Aqara API呼び出しで発生するエラーの基底クラス"""

    kind = "error"

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind, "message": str(self)}


class AqaraSerializationError(AqaraError):
    """リクエストのJSON化に失敗"""

    kind = "serialization"


class AqaraTransportError(AqaraError):
    """通信失敗、または HTTP 200 以外のステータス"""

    kind = "transport"

    def __init__(self, message: str, *, status_code: Optional[int] = None, cause: Optional[BaseException] = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.cause = cause

    def to_dict(self) -> Dict[str, Any]:
        out = super().to_dict()
        out["statusCode"] = self.status_code
        return out


class AqaraProtocolError(AqaraError):
    """レスポンスが期待した形式でない"""

    kind = "protocol"


class AqaraVendorError(AqaraError):
    """レスポンスは正常に読めたが code != 0"""

    kind = "vendor"

    def __init__(
        self,
        *,
        code: int,
        message: str = "",
        message_detail: str = "",
        request_id: str = "",
    ) -> None:
        super().__init__(f"Aqara API failed with code {code}: {message_detail or message}")
        self.code = code
        self.vendor_message = message
        self.message_detail = message_detail
        self.request_id = request_id

    def to_dict(self) -> Dict[str, Any]:
        out = super().to_dict()
        out.update({
            "code": self.code,
            "messageDetail": self.message_detail,
            "requestId": self.request_id,
        })
        return out
