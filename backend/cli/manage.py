"""CLI for database migrations and site maintenance."""
import argparse
import getpass
import subprocess
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


def cmd_migrate(args):
    """Run alembic upgrade to the requested revision."""
    rev = args.revision or "head"
    print(f"Running alembic upgrade {rev}")
    return subprocess.call([sys.executable, "-m", "alembic", "upgrade", rev], cwd=str(ROOT))


def cmd_init_db(args):
    """Create tables straight from the models (development databases)."""
    from app.core.database import init_db

    init_db()
    print("Database tables created")
    return 0


def cmd_create_user(args):
    """Register a user that can sign in and use the protected pages."""
    from app.core.database import get_session_local
    from app.core.errors import DuplicateEmailError
    from app.services.auth_service import AuthService

    password = args.password or getpass.getpass("Password: ")
    db = get_session_local()()
    try:
        user = AuthService(db).register_user(
            email=args.email,
            password=password,
            first_name=args.first_name,
            last_name=args.last_name,
        )
    except (DuplicateEmailError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    finally:
        db.close()

    print(f"Created user {user.email} with id {user.id}")
    print(f"Set ADMIN_USER_ID={user.id} to make this user the directory admin")
    return 0


def cmd_purge_sessions(args):
    """Delete expired sign-in sessions."""
    from app.core.database import get_session_local
    from app.services.auth_service import AuthService

    db = get_session_local()()
    try:
        removed = AuthService(db).purge_expired_sessions()
    finally:
        db.close()

    print(f"Removed {removed} expired session(s)")
    return 0


def cmd_list_contacts(args):
    """Print stored contact submissions, newest first."""
    from app.core.database import get_session_local
    from app.core.errors import PersistenceError
    from app.services.contact_service import ContactService

    db = get_session_local()()
    try:
        service = ContactService(db)
        contacts = service.list_all(limit=args.limit)
        total = service.count()
    except PersistenceError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    finally:
        db.close()

    if not contacts:
        print("No contact form submissions yet.")
        return 0

    print(f"Showing {len(contacts)} of {total} submission(s)")
    for contact in contacts:
        print(f"[{contact.created_at.isoformat()}] {contact.name} <{contact.email}>")
        print(f"    {contact.message}")
    return 0


def build_parser():
    p = argparse.ArgumentParser(prog="manage")
    sub = p.add_subparsers(dest="cmd")
    s = sub.add_parser("migrate", help="Run migrations (upgrade head)")
    s.add_argument("--revision", "-r", help="Revision to upgrade to", default="head")
    s.set_defaults(func=cmd_migrate)
    s = sub.add_parser("init-db", help="Create tables without alembic")
    s.set_defaults(func=cmd_init_db)
    s = sub.add_parser("create-user", help="Register a user")
    s.add_argument("email")
    s.add_argument("--password", "-p", help="Password (prompted when omitted)")
    s.add_argument("--first-name", dest="first_name")
    s.add_argument("--last-name", dest="last_name")
    s.set_defaults(func=cmd_create_user)
    s = sub.add_parser("purge-sessions", help="Delete expired sessions")
    s.set_defaults(func=cmd_purge_sessions)
    s = sub.add_parser("list-contacts", help="Print contact submissions")
    s.add_argument("--limit", "-n", type=int, default=0, help="Show at most N submissions")
    s.set_defaults(func=cmd_list_contacts)
    return p


def main(argv=None):
    p = build_parser()
    args = p.parse_args(argv)
    if not hasattr(args, "func"):
        p.print_help()
        return 2
    return args.func(args)


if __name__ == "__main__":
    raise SystemExit(main())
