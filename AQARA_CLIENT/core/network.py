import requests
import logging
from typing import Callable, TypeVar
import tenacity
from tenacity import retry, stop_after_attempt, wait_exponential, retry_if_exception_type
from requests.adapters import HTTPAdapter

from core.errors import AqaraTransportError

T = TypeVar("T")

def create_session() -> requests.Session:
    """
    Aqara API用のRequestsセッションを作成する。
    POSTの自動再送は同じNonceを再利用してしまうため、アダプタ側のリトライは無効。
    """
    session = requests.Session()
    adapter = HTTPAdapter(max_retries=0)
    session.mount("https://", adapter)
    session.mount("http://", adapter)
    return session

def retry_api_call(func: Callable[..., T], attempts: int = 3) -> Callable[..., T]:
    """
    API呼び出し用リトライラッパー (呼び出し側で使うポリシー)。
    通信エラーのみ再試行する。毎回クライアントを呼び直すので Nonce/Time は試行ごとに新しくなる。
    """
    if attempts <= 1:
        return func
    return retry(
        stop=stop_after_attempt(attempts),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        retry=retry_if_exception_type(AqaraTransportError),
        before_sleep=tenacity.before_sleep_log(logging.getLogger("core.network"), logging.WARNING),
        reraise=True
    )(func)
