"""Generate a starter ``.env`` with a fresh encryption key."""

from __future__ import annotations

import argparse
import secrets
import sys
from pathlib import Path

ENV_TEMPLATE = """# Live price provider keys
# Alpha Vantage (ETFs and stocks): https://www.alphavantage.co/support/#api-key
ALPHAVANTAGE_API_KEY=your_alpha_vantage_api_key_here

# GoldAPI (XAU spot price): https://www.goldapi.io/
GOLD_API_KEY=your_gold_api_key_here

# CoinGecko needs no key.

# Keep this key secret. Losing it makes the encrypted investments file unreadable.
ENCRYPTION_KEY={encryption_key}

PORT=3001
DATA_FILE=investments.json
"""


def generate_encryption_key() -> str:
    return secrets.token_hex(32)


def write_env_file(path: Path, force: bool = False) -> bool:
    """Write the template to ``path``; returns False when it exists and ``force`` is off."""
    if path.exists() and not force:
        return False
    path.write_text(ENV_TEMPLATE.format(encryption_key=generate_encryption_key()), encoding="utf-8")
    return True


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create a .env file for the investment dashboard backend")
    parser.add_argument("--path", "-p", type=Path, default=Path(".env"), help="Where to write the file (default: ./.env)")
    parser.add_argument("--force", "-f", action="store_true", help="Overwrite an existing file")
    args = parser.parse_args(argv)

    try:
        written = write_env_file(args.path, force=args.force)
    except OSError as error:
        print(f"Could not write {args.path}: {error}", file=sys.stderr)
        return 1
    if not written:
        print(f"{args.path} already exists; rerun with --force to regenerate it.")
        return 0
    print(f"Created {args.path} with a new ENCRYPTION_KEY.")
    print("Replace the provider key placeholders, then start the server with: investment-dashboard")
    print("Keep the file out of version control.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
