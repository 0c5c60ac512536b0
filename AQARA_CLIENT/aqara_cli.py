# AQARA_CLIENT/aqara_cli.py
import argparse
import logging
import sys
from typing import List, Optional

import config
from core.errors import AqaraError
from core.logger import setup_logging
from core.network import retry_api_call
from models.aqara import AqaraRegion, DeviceListResult
from services.aqara_service import AqaraClient

REGION_CHOICES = [r.name.lower() for r in AqaraRegion]

def parse_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """コマンドライン引数の解析"""
    parser = argparse.ArgumentParser(description='Aqaraアカウントにログインしてデバイス一覧を表示する')
    parser.add_argument('--appid', type=str, default=config.AQARA_APP_ID, help='Aqara App ID')
    parser.add_argument('--keyid', type=str, default=config.AQARA_KEY_ID, help='Aqara Key ID')
    parser.add_argument('--appkey', type=str, default=config.AQARA_APP_KEY, help='Aqara App Key')
    parser.add_argument('--account', type=str, default=config.AQARA_ACCOUNT,
                        help='Aqara registered phone number or email address')
    parser.add_argument('--region', type=str, default=config.AQARA_REGION.lower(), choices=REGION_CHOICES,
                        help='APIサーバーのリージョン')
    parser.add_argument('--debug', action='store_true', default=config.AQARA_DEBUG,
                        help='生のレスポンスをログに出す')
    parser.add_argument('--retries', type=int, default=config.API_RETRIES,
                        help='通信エラー時の試行回数 (0 = リトライなし)')
    return parser.parse_args(argv)

def print_devices(result: DeviceListResult) -> None:
    print(f"\n📦 デバイス数: {result.totalCount}")
    for device in result.data:
        prefix = "✅" if device.is_online else "💤"
        print(f"{prefix} Device Name:  {device.deviceName}")
        print(f"    Device Model: {device.model}")

def main(argv: Optional[List[str]] = None) -> int:
    args = parse_arguments(argv)
    logger = setup_logging("aqara_cli", level=logging.DEBUG if args.debug else logging.INFO)

    if not (args.appid and args.keyid and args.appkey and args.account):
        print("You must provide the following arguments: appid, keyid, appkey and account")
        return 1

    client = AqaraClient(
        AqaraRegion.from_name(args.region),
        args.appid,
        args.keyid,
        args.appkey,
        args.account,
        debug=args.debug,
    )

    try:
        retry_api_call(client.request_auth_code, attempts=args.retries)()
        try:
            auth_code = input("🔑 認証コードを入力してください: ").strip()
        except (EOFError, KeyboardInterrupt):
            logger.warning("認証コードが入力されませんでした")
            return 1
        retry_api_call(client.exchange_token, attempts=args.retries)(auth_code)
        devices = retry_api_call(client.list_devices, attempts=args.retries)()
    except AqaraError as e:
        logger.error(f"❌ Aqara API呼び出し失敗: {e.to_dict()}")
        return 1

    print_devices(devices)
    return 0

if __name__ == "__main__":
    sys.exit(main())
