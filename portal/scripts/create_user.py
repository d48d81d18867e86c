"""
Create an internal user (e.g. the first admin). Run from project root:
  python -m portal.scripts.create_user EMAIL PASSWORD [--name NAME] [--role admin|member]
Example:
  python -m portal.scripts.create_user pastor@example.org your-secure-password --role admin
"""
import argparse
import logging
import sys

from portal.core.config import get_settings
from portal.core.database import Database
from portal.core.logging_config import configure_logging
from portal.core.security import EMAIL_MAX_LEN, PASSWORD_MAX_LEN, PASSWORD_MIN_LEN
from portal.models.user import ROLE_MEMBER, VALID_ROLES
from portal.services.auth import AuthService
from portal.services.credential_store import SqlCredentialStore
from portal.services.errors import DuplicateCredentialError, StoreUnavailableError

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create an internal portal user.")
    parser.add_argument("email", help="Login email (unique)")
    parser.add_argument("password", help=f"Password ({PASSWORD_MIN_LEN}-{PASSWORD_MAX_LEN} chars)")
    parser.add_argument("--name", default=None, help="Display name")
    parser.add_argument("--role", default=ROLE_MEMBER, choices=list(VALID_ROLES))
    args = parser.parse_args(argv)

    settings = get_settings()
    configure_logging(settings.LOG_LEVEL)

    email = args.email.strip()
    if not email or "@" not in email or len(email) > EMAIL_MAX_LEN:
        print("Invalid email.", file=sys.stderr)
        return 1
    if not (PASSWORD_MIN_LEN <= len(args.password) <= PASSWORD_MAX_LEN):
        print(f"Password must be {PASSWORD_MIN_LEN}-{PASSWORD_MAX_LEN} characters.", file=sys.stderr)
        return 1

    database = Database(settings)
    db = database.SessionLocal()
    try:
        auth = AuthService(SqlCredentialStore(db), bcrypt_rounds=settings.BCRYPT_ROUNDS)
        user_id = auth.register(email, args.password, name=args.name, role=args.role)
        print(f"Created user '{email}' (id={user_id}) with role '{args.role}'.")
        return 0
    except DuplicateCredentialError:
        print(f"User '{email}' already exists.", file=sys.stderr)
        return 1
    except StoreUnavailableError as e:
        logger.error("Could not create user: %s", e.message)
        return 2
    finally:
        db.close()
        database.dispose()


if __name__ == "__main__":
    sys.exit(main())
