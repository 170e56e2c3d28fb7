"""Print a long-lived bearer token for an existing account.

Usage:
    python create_token.py maria@example.com [days]
"""
import sys

from public_services_api.app.core.kv_store import get_kv_store
from public_services_api.app.core.security import create_access_token


def main(argv: list[str]) -> int:
    if len(argv) < 2:
        print(__doc__.strip())
        return 2
    email = argv[1].strip().lower()
    days = int(argv[2]) if len(argv) > 2 else 365
    credential = get_kv_store().get(f"credential:{email}")
    if not credential:
        print(f"No account registered for {email}", file=sys.stderr)
        return 1
    token = create_access_token(
        {"sub": credential["userId"], "email": credential["email"]},
        expires_delta=days * 24 * 60 * 60,
    )
    print(token)
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv))
