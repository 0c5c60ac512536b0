import logging
import traceback
import os
import requests
from logging.handlers import TimedRotatingFileHandler
from typing import Optional
import config

LOG_FORMAT = '%(asctime)s [%(levelname)s] %(name)s: %(message)s'
LOG_DATE_FORMAT = '%Y-%m-%d %H:%M:%S'
# Discordのメッセージ上限は2000文字
DISCORD_CONTENT_LIMIT = 2000

def build_discord_content(log_msg: str, logger_name: str, stack_trace: str = "") -> str:
    """Discordに送る本文。上限を超える場合はスタックトレース側を削る"""
    header = f"🚨 **Aqara API エラー** (`{logger_name}`)\n```\n{log_msg[:1500]}\n```"
    if not stack_trace:
        return header
    room = DISCORD_CONTENT_LIMIT - len(header) - len("\n```python\n```")
    if room <= 0:
        return header
    return f"{header}\n```python\n{stack_trace[-room:]}```"

class DiscordErrorHandler(logging.Handler):
    """ERROR以上のログをDiscord Webhookへ送る"""
    def __init__(self, webhook_url: Optional[str] = None):
        super().__init__()
        self.webhook_url = webhook_url

    def emit(self, record):
        # 再帰防止: Discord関連のログは送らない
        if record.levelno < logging.ERROR or "Discord" in str(record.msg):
            return

        url = self.webhook_url or config.DISCORD_WEBHOOK_ERROR
        if not url:
            return

        stack_trace = ""
        if record.exc_info:
            stack_trace = "".join(traceback.format_exception(*record.exc_info))
        content = build_discord_content(self.format(record), record.name, stack_trace)

        try:
            requests.post(url, json={"content": content}, timeout=5)
        except requests.exceptions.RequestException:
            self.handleError(record)


def setup_logging(name: str, level: int = logging.INFO, webhook_url: Optional[str] = None) -> logging.Logger:
    """ロガーのセットアップ"""
    logger = logging.getLogger(name)
    logger.propagate = False

    if logger.handlers:
        logger.handlers.clear()

    logger.setLevel(level)
    formatter = logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)

    # コンソール出力
    stream_handler = logging.StreamHandler()
    stream_handler.setFormatter(formatter)
    logger.addHandler(stream_handler)

    # ファイル出力
    os.makedirs(config.LOG_DIR, exist_ok=True)
    log_file = os.path.join(config.LOG_DIR, config.LOG_FILE_NAME)
    file_handler = TimedRotatingFileHandler(
        filename=log_file,
        when='midnight',
        interval=1,
        backupCount=7,
        encoding='utf-8'
    )
    file_handler.setFormatter(formatter)
    logger.addHandler(file_handler)

    # Discord通知
    target_url = webhook_url or config.DISCORD_WEBHOOK_ERROR
    if target_url:
        discord_handler = DiscordErrorHandler(webhook_url=target_url)
        discord_handler.setLevel(logging.ERROR)
        discord_handler.setFormatter(formatter)
        logger.addHandler(discord_handler)

    # 外部ライブラリのノイズ抑制
    logging.getLogger("urllib3").setLevel(logging.WARNING)

    return logger
