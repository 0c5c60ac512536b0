# AQARA_CLIENT/models/aqara.py
from enum import Enum
from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Optional, Union, List, Dict, Any

class AqaraRegion(str, Enum):
    """APIサーバー (リージョンごとのホスト名)"""
    CHINA = "open-cn.aqara.com"
    USA = "open-usa.aqara.com"
    KOREA = "open-kr.aqara.com"
    RUSSIA = "open-ru.aqara.com"
    EUROPE = "open-ger.aqara.com"
    SINGAPORE = "open-sg.aqara.com"

    @classmethod
    def from_name(cls, name: str) -> "AqaraRegion":
        """'europe' のような名前、またはホスト名から解決する"""
        key = name.strip()
        for region in cls:
            if key.upper() == region.name or key.lower() == region.value:
                return region
        raise ValueError(f"unknown Aqara region: {name!r}")

# --- リクエスト ---

class AqaraRequest(BaseModel):
    """リクエストの外側 (intent + data)"""
    intent: str
    data: Dict[str, Any] = Field(default_factory=dict)

class AuthCodeData(BaseModel):
    """config.auth.getAuthCode"""
    account: str
    accountType: int = 0
    accessTokenValidity: str = "1h"

class TokenData(BaseModel):
    """config.auth.getToken"""
    authCode: str
    account: str
    accountType: int = 0

class RefreshTokenData(BaseModel):
    """config.auth.refreshToken"""
    refreshToken: str

class DeviceQueryData(BaseModel):
    """query.device.info (絞り込みなし)"""
    dids: List[str] = Field(default_factory=list)
    positionId: str = ""
    pageNum: int = 1
    pageSize: int = 100

# --- レスポンス ---

class AqaraResponse(BaseModel):
    """レスポンスの外側。result は intent ごとに形が違うので code 確認後にデコードする"""
    code: int
    requestId: str = ""
    message: str = ""
    messageDetail: str = ""
    result: Any = None

    @field_validator("requestId", "message", "messageDetail", mode="before")
    @classmethod
    def _null_to_empty(cls, v: Any) -> Any:
        # null は空文字として扱う
        return "" if v is None else v

class TokenResult(BaseModel):
    expiresIn: Optional[Union[int, str]] = None
    openId: Optional[str] = None
    accessToken: str = Field(min_length=1)
    refreshToken: str = Field(min_length=1)

class Device(BaseModel):
    model_config = ConfigDict(protected_namespaces=())

    did: str
    parentDid: Optional[str] = None
    positionId: Optional[str] = None
    # APIによって数値/文字列どちらもあり得る
    createTime: Optional[Union[int, str]] = None
    updateTime: Optional[Union[int, str]] = None
    model: Optional[str] = None
    modelType: Optional[int] = None
    state: Optional[int] = None
    firmwareVersion: Optional[str] = None
    deviceName: Optional[str] = None
    timeZone: Optional[str] = None

    @property
    def is_online(self) -> bool:
        return self.state == 1

class DeviceListResult(BaseModel):
    data: List[Device] = Field(default_factory=list)
    totalCount: int = 0

    @field_validator("data", mode="before")
    @classmethod
    def _null_to_list(cls, v: Any) -> Any:
        return [] if v is None else v

    @field_validator("totalCount", mode="before")
    @classmethod
    def _null_to_zero(cls, v: Any) -> Any:
        return 0 if v is None else v

# --- セッション ---

class SessionState(BaseModel):
    """トークンの組 (丸ごと差し替える。部分更新はしない)"""
    model_config = ConfigDict(frozen=True)

    access_token: str = ""
    refresh_token: str = ""

    @property
    def authenticated(self) -> bool:
        return bool(self.access_token)
