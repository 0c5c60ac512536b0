# AQARA_CLIENT/config.py
import os
from typing import Optional
from dotenv import load_dotenv

# .envファイルのロード
load_dotenv()

# ==========================================
# 1. 認証・API設定 (Secrets)
# ==========================================
AQARA_APP_ID: str = os.getenv("AQARA_APP_ID", "")
AQARA_KEY_ID: str = os.getenv("AQARA_KEY_ID", "")
AQARA_APP_KEY: str = os.getenv("AQARA_APP_KEY", "")
# 登録済みの電話番号またはメールアドレス
AQARA_ACCOUNT: str = os.getenv("AQARA_ACCOUNT", "")

# Discord Webhook (エラー通知用)
DISCORD_WEBHOOK_ERROR: Optional[str] = os.getenv("DISCORD_WEBHOOK_ERROR")

# ==========================================
# 2. API・通信設定
# ==========================================
# china / usa / korea / russia / europe / singapore
AQARA_REGION: str = os.getenv("AQARA_REGION", "europe")
AQARA_API_PATH = "/v3.0/open/api"
AQARA_LANG = "en"

# 生のレスポンスをログに出す (個人情報はマスクされない)
AQARA_DEBUG: bool = os.getenv("AQARA_DEBUG", "false").lower() in ("1", "true", "yes")

HTTP_TIMEOUT: float = float(os.getenv("HTTP_TIMEOUT", "10"))
# 呼び出し側のリトライ回数 (0 = リトライなし)
API_RETRIES: int = int(os.getenv("API_RETRIES", "0"))

# デバイス一覧の取得件数
DEVICE_PAGE_SIZE = 100

# ==========================================
# 3. システム・パス設定
# ==========================================
BASE_DIR = os.path.dirname(os.path.abspath(__file__))
LOG_DIR = os.getenv("AQARA_LOG_DIR", os.path.join(BASE_DIR, "logs"))
LOG_FILE_NAME = "aqara_client.log"
