import unittest
from unittest.mock import MagicMock, patch

import aqara_cli
from core.errors import AqaraVendorError
from models.aqara import AqaraRegion, Device, DeviceListResult

ARGS = ["--appid", "app", "--keyid", "key", "--appkey", "secret", "--account", "user@example.com", "--region", "usa"]

class TestAqaraCli(unittest.TestCase):

    def test_missing_credentials(self):
        with patch("builtins.print") as mock_print, patch.object(aqara_cli, "AqaraClient") as mock_client:
            code = aqara_cli.main(["--appid", "", "--keyid", "", "--appkey", "", "--account", ""])
        self.assertEqual(code, 1)
        mock_client.assert_not_called()
        self.assertIn("appid, keyid, appkey and account", mock_print.call_args[0][0])

    @patch("builtins.input", return_value=" 123456 ")
    @patch.object(aqara_cli, "AqaraClient")
    def test_login_and_list(self, mock_client_cls, mock_input):
        client = MagicMock()
        client.list_devices.return_value = DeviceListResult(
            data=[Device(did="lumi.1", deviceName="Front Door", model="lumi.sensor_magnet.v2", state=1)],
            totalCount=1,
        )
        mock_client_cls.return_value = client

        with patch("builtins.print") as mock_print:
            code = aqara_cli.main(ARGS)

        self.assertEqual(code, 0)
        args, kwargs = mock_client_cls.call_args
        self.assertEqual(args, (AqaraRegion.USA, "app", "key", "secret", "user@example.com"))
        client.request_auth_code.assert_called_once_with()
        client.exchange_token.assert_called_once_with("123456")
        printed = " ".join(str(c.args[0]) for c in mock_print.call_args_list)
        self.assertIn("Front Door", printed)
        self.assertIn("lumi.sensor_magnet.v2", printed)

    @patch("builtins.input", return_value="000000")
    @patch.object(aqara_cli, "AqaraClient")
    def test_vendor_error_exits_with_failure(self, mock_client_cls, mock_input):
        client = MagicMock()
        client.exchange_token.side_effect = AqaraVendorError(code=2001, message_detail="auth code invalid")
        mock_client_cls.return_value = client

        code = aqara_cli.main(ARGS)

        self.assertEqual(code, 1)
        client.list_devices.assert_not_called()

    @patch("builtins.input", side_effect=EOFError)
    @patch.object(aqara_cli, "AqaraClient")
    def test_closed_stdin_exits_with_failure(self, mock_client_cls, mock_input):
        client = MagicMock()
        mock_client_cls.return_value = client

        code = aqara_cli.main(ARGS)

        self.assertEqual(code, 1)
        client.exchange_token.assert_not_called()

if __name__ == '__main__':
    unittest.main()
