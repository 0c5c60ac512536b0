import unittest
from unittest.mock import MagicMock, patch

import requests

from core.errors import AqaraTransportError, AqaraVendorError
from core.network import create_session, retry_api_call

class TestRetryApiCall(unittest.TestCase):

    def setUp(self):
        # 待機はしない
        self.patcher = patch("time.sleep")
        self.patcher.start()

    def tearDown(self):
        self.patcher.stop()

    def test_retries_transport_errors(self):
        func = MagicMock(side_effect=[AqaraTransportError("down", status_code=503), "ok"])
        self.assertEqual(retry_api_call(func, attempts=3)(), "ok")
        self.assertEqual(func.call_count, 2)

    def test_gives_up_after_attempts(self):
        func = MagicMock(side_effect=AqaraTransportError("down", status_code=503))
        with self.assertRaises(AqaraTransportError):
            retry_api_call(func, attempts=3)()
        self.assertEqual(func.call_count, 3)

    def test_vendor_errors_are_not_retried(self):
        func = MagicMock(side_effect=AqaraVendorError(code=108, message_detail="bad sign"))
        with self.assertRaises(AqaraVendorError):
            retry_api_call(func, attempts=3)()
        self.assertEqual(func.call_count, 1)

    def test_no_retry_by_default_policy(self):
        func = MagicMock(return_value="ok")
        self.assertIs(retry_api_call(func, attempts=0), func)

class TestCreateSession(unittest.TestCase):

    def test_adapter_does_not_resend(self):
        session = create_session()
        adapter = session.get_adapter("https://open-ger.aqara.com/v3.0/open/api")
        self.assertEqual(adapter.max_retries.total, 0)
        self.assertIsInstance(session, requests.Session)

if __name__ == '__main__':
    unittest.main()
