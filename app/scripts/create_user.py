"""
Create a user account from the shell. Run from project root:
  python -m app.scripts.create_user EMAIL PASSWORD
Example:
  python -m app.scripts.create_user admin@example.com your-secure-password
"""
import argparse
import sys

from app.core.config import get_settings
from app.core.database import create_db_engine, create_session_factory
from app.services.users import UserServiceError, register_user


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create a user account (same rules as POST /users/register).")
    parser.add_argument("email", help="Account email")
    parser.add_argument("password", help="Plain-text password")
    args = parser.parse_args(argv)

    settings = get_settings()
    engine = create_db_engine(settings)
    db = create_session_factory(engine)()
    try:
        user = register_user(
            db, args.email, args.password, bcrypt_rounds=settings.BCRYPT_ROUNDS
        )
        print(f"Created user '{user.email}' with id {user.id}.")
        return 0
    except UserServiceError as e:
        print(e.message, file=sys.stderr)
        return 1
    finally:
        db.close()
        engine.dispose()


if __name__ == "__main__":
    sys.exit(main())
