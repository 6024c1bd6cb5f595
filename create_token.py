"""Issue an admin JWT for the admin signup endpoints.

Usage: python create_token.py admin@example.com [hours]

The email must also be listed in ADMIN_EMAILS for the token to be accepted.
"""

import sys

from auth.admin import is_admin_email
from auth.jwt import create_admin_token


def main(argv: list[str]) -> int:
    if len(argv) < 2:
        print(__doc__.strip())
        return 1

    email = argv[1].strip().lower()
    hours = int(argv[2]) if len(argv) > 2 else None
    if not is_admin_email(email):
        print(f"warning: {email} is not in ADMIN_EMAILS; the token will be refused", file=sys.stderr)

    print(create_admin_token(email, expires_in_hours=hours))
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv))
