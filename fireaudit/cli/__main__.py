# fireaudit/cli/__main__.py
from __future__ import annotations

import argparse
from datetime import date

from fireaudit.cli.seed_demo import seed_demo
from fireaudit.db import SessionLocal, init_db
from fireaudit.logging_config import configure_logging
from fireaudit.middleware.request_id import bound_request_id, new_request_id
from fireaudit.services.notification_service import run_auto_notifications


def _seed(args: argparse.Namespace) -> None:
    out = seed_demo(
        user_email=args.user_email,
        user_name=args.user_name,
        create_sample_client=(not args.no_sample_client),
    )
    print(
        {
            "ok": True,
            "user_email": out.user_email,
            "sample_client_id": out.client_id,
            "next_inspection_date": out.next_inspection_date.isoformat() if out.next_inspection_date else None,
        }
    )


def _remind(args: argparse.Namespace) -> None:
    init_db()
    db = SessionLocal()
    try:
        today = date.fromisoformat(args.today) if args.today else None
        with bound_request_id(new_request_id("cli")):
            print({"ok": True, **run_auto_notifications(db, today=today)})
    finally:
        db.close()


def main() -> None:
    configure_logging()

    p = argparse.ArgumentParser(prog="fireaudit")
    sub = p.add_subparsers(dest="cmd", required=True)

    s = sub.add_parser("seed", help="create a demo admin and a sample building")
    s.add_argument("--user-email", default="admin@demo.local")
    s.add_argument("--user-name", default="Admin")
    s.add_argument("--no-sample-client", action="store_true")
    s.set_defaults(func=_seed)

    r = sub.add_parser("remind", help="send upcoming-inspection reminders now")
    r.add_argument("--today", default=None, help="YYYY-MM-DD, defaults to the current date")
    r.set_defaults(func=_remind)

    args = p.parse_args()
    args.func(args)


if __name__ == "__main__":
    main()
