import argparse
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from circulate.core import db, auth
from circulate.core.models import Member
from circulate.core.exceptions import CirculateAPIError


def main():
    parser = argparse.ArgumentParser(description="Create or promote a Circulate administrator")
    parser.add_argument("--username", required=True)
    parser.add_argument("--password", help="Required when creating a new member")
    parser.add_argument("--name", default="Administrator")
    parser.add_argument("--email")
    parser.add_argument("--phone")
    args = parser.parse_args()

    engine = db.make_engine()
    db.init(engine)
    sessions = db.make_sessionmaker(engine)
    try:
        with db.transaction(sessions) as session:
            if existing := Member.by_username(session, args.username):
                existing.admin = True
                print(f"Success! Member '{args.username}' promoted to administrator.")
                return
            if not (args.password and args.email and args.phone):
                parser.error("--password, --email and --phone are required for a new member")
            auth.signup(
                session, name=args.name, username=args.username, password=args.password,
                email=args.email, phone=args.phone, admin=True,
            )
            print(f"Success! Administrator '{args.username}' created.")
    except CirculateAPIError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    finally:
        engine.dispose()


if __name__ == "__main__":
    main()
