"""Generate a shared TOTP secret and its provisioning QR code.

Offline, setup-time only: the running service never rotates the secret.

    python scripts/setup_totp.py --issuer "Attendance Bot" --account Employee --qr totp.png
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from src.otp_attendance.otp_attendance.core.constants import DEFAULT_ISSUER
from src.otp_attendance.otp_attendance.credentials.qr import render_qr_png
from src.otp_attendance.otp_attendance.credentials.totp import TOTPService, generate_secret

ENV_EXAMPLE = """# Shared TOTP secret for attendance verification
TOTP_SECRET={secret}

# Admin password for report export and the QR endpoint
ADMIN_PASSWORD=your_admin_password_here

# development | testing | production
APP_ENV=development

TIMEZONE=Asia/Jakarta
DB_HOST=localhost
DB_PORT=3306
DB_USER=root
DB_PASSWORD=
DB_NAME=otp_attendance
"""


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--issuer", default=DEFAULT_ISSUER)
    parser.add_argument("--account", default="Employee")
    parser.add_argument("--qr", type=Path, default=None, help="write the provisioning QR code to this PNG file")
    args = parser.parse_args(argv)

    secret = generate_secret()
    totp = TOTPService(secret)
    uri = totp.key_uri(args.account, args.issuer)

    print(f"Generated TOTP Secret: {secret}")
    print(f"OTP Auth URL: {uri}")

    if args.qr:
        args.qr.write_bytes(render_qr_png(uri).getvalue())
        print(f"QR code written to {args.qr}")

    print("\n=== Setup ===")
    print(f"1. Put TOTP_SECRET={secret} in your .env file")
    print("2. Scan the QR code (or enter the secret) in Google Authenticator, Authy, ...")
    print("3. Start the service and test with the 6-digit code from your app")
    print(f"\nCurrent code (for testing): {totp.derive()}")
    print(f"Time remaining for current code: {totp.time_remaining()} seconds")

    env_example = REPO_ROOT / ".env.example"
    if not env_example.exists():
        env_example.write_text(ENV_EXAMPLE.format(secret=secret), encoding="utf-8")
        print("\nOK: Created .env.example with the generated secret")


if __name__ == "__main__":
    main()
