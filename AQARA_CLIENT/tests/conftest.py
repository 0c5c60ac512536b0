# AQARA_CLIENT/tests/conftest.py
import os
import sys
import tempfile

# プロジェクトルートにパスを通す
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

# ログは一時フォルダへ、Discord通知はテスト中無効
os.environ["AQARA_LOG_DIR"] = tempfile.mkdtemp()
os.environ["DISCORD_WEBHOOK_ERROR"] = ""
