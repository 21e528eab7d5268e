"""
Print a bearer token for a user id, in the auth service's token format.
Use when the auth service is not running locally so you can call the API by hand.

Run from project root:
  python scripts/create_dev_token.py 1
  curl -H "Authorization: Bearer <token>" http://localhost:8082/rent-request/renter

The token is signed with JWT_SECRET_KEY from .env; it must match the running service.
"""
import os
import sys

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from app.services.auth import create_access_token  # noqa: E402


def main():
    if len(sys.argv) < 2 or not sys.argv[1].isdigit():
        print("Usage: python scripts/create_dev_token.py <user_id> [expires_minutes]")
        sys.exit(1)
    user_id = int(sys.argv[1])
    minutes = int(sys.argv[2]) if len(sys.argv) > 2 else 60
    print(create_access_token(user_id, expires_minutes=minutes))


if __name__ == "__main__":
    main()
