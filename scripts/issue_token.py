"""
Issue a development bearer token for a user id.

Usage: python scripts/issue_token.py <user_id> [--hours N]
"""
import argparse
import os
import sys
from datetime import timedelta

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from src.config.settings import get_settings
from src.infrastructure.security.tokens import create_access_token


def main():
    parser = argparse.ArgumentParser(description="Mint a JWT for local API testing")
    parser.add_argument("user_id")
    parser.add_argument("--hours", type=float, default=1.0, help="token lifetime")
    args = parser.parse_args()

    settings = get_settings()
    if settings.env == "production":
        sys.exit("Refusing to mint tokens with production settings")

    token = create_access_token(
        args.user_id,
        settings.jwt_secret,
        settings.jwt_algorithm,
        expires_in=timedelta(hours=args.hours),
        audience=settings.jwt_audience,
    )
    print(token)


if __name__ == "__main__":
    main()
