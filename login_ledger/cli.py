import argparse
import os
import sys

from .config import load_config
from .session import LedgerSession
from .shell import LedgerShell


def _print_rows(rows, empty: str = "<empty>") -> None:
	if not rows:
		print(empty)
		return
	for r in rows:
		print(r)


def main(argv=None) -> int:
	argv = argv if argv is not None else sys.argv[1:]
	parser = argparse.ArgumentParser(prog="login-ledger")
	parser.add_argument("--data-file", help="Ledger data file (default from config)")
	parser.add_argument("--config", help="YAML config file")
	sub = parser.add_subparsers(dest="cmd")

	sub.add_parser("shell", help="Interactive menu (default)")
	sub.add_parser("status")
	sub.add_parser("events").add_argument("--sort", action="store_true", help="Show sorted by username")
	sub.add_parser("alerts").add_argument("--dismissed", action="store_true", help="Show the undo history instead")

	p_record = sub.add_parser("record", help="Record one login attempt")
	p_record.add_argument("user")
	p_record.add_argument("ip")
	p_record.add_argument("timestamp")
	outcome = p_record.add_mutually_exclusive_group(required=True)
	outcome.add_argument("--success", dest="success", action="store_true")
	outcome.add_argument("--failed", dest="success", action="store_false")

	sub.add_parser("dismiss", help="Dismiss the oldest pending alert")
	sub.add_parser("undo", help="Restore the most recently dismissed alert")
	sub.add_parser("sort", help="Sort stored logs by username")

	args = parser.parse_args(argv)
	try:
		cfg = load_config(args.config)
	except ValueError as e:
		print(f"Invalid configuration: {e}")
		return 1
	if args.data_file:
		cfg.data_file = args.data_file
	session = LedgerSession(cfg)

	if args.cmd in (None, "shell"):
		return LedgerShell(session).run()

	loaded = session.load()
	# only an existing but unreadable file is fatal, a missing one starts empty
	if not loaded.ok and os.path.exists(cfg.data_file):
		print(loaded)
		return 1

	if args.cmd in ("status", "events", "alerts"):
		store = session.store
		if args.cmd == "status":
			print(store.summary())
		elif args.cmd == "events":
			if args.sort:
				store.sort_by_identity()
			_print_rows(store.list_events(), "No login attempts recorded.")
		elif args.dismissed:
			_print_rows(store.list_dismissed(), "No dismissed alerts.")
		else:
			_print_rows(store.list_backlog(), "No pending alerts.")
		return 0

	store = session.store
	if args.cmd == "record":
		alert = store.record_attempt(args.user, args.ip, args.timestamp, args.success)
		print("Login recorded successfully.")
		if alert is not None:
			print(f"** ALERT GENERATED ** Suspicious IP: {alert.ip_address}")
	elif args.cmd == "dismiss":
		alert = store.dismiss_next()
		print(f"Alert dismissed: {alert.ip_address}" if alert else "No alerts to dismiss.")
	elif args.cmd == "undo":
		alert = store.undo_last_dismissal()
		print(f"Undo complete. Alert restored: {alert.ip_address}" if alert else "No dismissed alerts to restore.")
	elif args.cmd == "sort":
		print("Logs sorted by username." if store.sort_by_identity() else "Not enough logs to sort.")
	else:
		return 1

	saved = session.save()
	print(saved)
	return 0 if saved.ok else 1


if __name__ == "__main__":
	sys.exit(main())
