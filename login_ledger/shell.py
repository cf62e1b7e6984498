from typing import Callable, Iterable

from .models import Alert
from .session import LedgerSession

MENU = """
===== SUSPICIOUS LOGIN DETECTION SYSTEM =====
{status}
1. Add Login Attempt
2. Display All Logs
3. Sort Logs (by Username)
4. View Pending Alerts
5. Dismiss Next Alert
6. Undo Alert Dismissal
7. Save Data
8. Load Data
9. Exit"""


def _print_lines(output: Callable[[str], None], rows: Iterable, empty: str) -> None:
	rows = list(rows)
	if not rows:
		output(empty)
		return
	for row in rows:
		output(str(row))


class LedgerShell:
	"""Text menu over a LedgerSession. Every core result is printed here."""

	def __init__(
		self,
		session: LedgerSession,
		input_func: Callable[[str], str] = input,
		output: Callable[[str], None] = print,
	) -> None:
		self.session = session
		self.input = input_func
		self.output = output
		self.session.store.on_alert = self._announce_alert
		self.actions = {
			1: self.add_attempt,
			2: self.display_logs,
			3: self.sort_logs,
			4: self.view_alerts,
			5: self.dismiss_alert,
			6: self.undo_dismiss,
			7: self.save_data,
			8: self.load_data,
		}

	def _announce_alert(self, alert: Alert) -> None:
		self.output(f"** ALERT GENERATED ** Suspicious IP: {alert.ip_address}")

	def _prompt(self, text: str) -> str:
		return self.input(text).strip()

	def add_attempt(self) -> None:
		user = self._prompt("Enter username: ")
		ip = self._prompt("Enter IP address: ")
		ts = self._prompt("Timestamp (e.g., 2025-11-23 14:00): ")
		success = self._prompt("Success? (true/false): ").lower() == "true"
		self.session.store.record_attempt(user, ip, ts, success)
		self.output("Login recorded successfully.")

	def display_logs(self) -> None:
		_print_lines(self.output, self.session.store.list_events(), "No login attempts recorded.")

	def sort_logs(self) -> None:
		if self.session.store.sort_by_identity():
			self.output("Logs sorted by username.")
		else:
			self.output("Not enough logs to sort.")

	def view_alerts(self) -> None:
		alerts = self.session.store.list_backlog()
		if alerts:
			self.output("=== Pending Alerts ===")
		_print_lines(self.output, alerts, "No pending alerts.")

	def dismiss_alert(self) -> None:
		alert = self.session.store.dismiss_next()
		if alert is None:
			self.output("No alerts to dismiss.")
		else:
			self.output(f"Alert dismissed: {alert.ip_address}")

	def undo_dismiss(self) -> None:
		alert = self.session.store.undo_last_dismissal()
		if alert is None:
			self.output("No dismissed alerts to restore.")
		else:
			self.output(f"Undo complete. Alert restored: {alert.ip_address}")

	def _ask_path(self, verb: str) -> str:
		default = self.session.default_path
		return self._prompt(f"{verb} filename (blank for default '{default}'): ") or default

	def save_data(self) -> None:
		self.output(str(self.session.save(self._ask_path("Save"))))

	def load_data(self) -> None:
		self.output(str(self.session.load(self._ask_path("Load"))))

	def exit(self) -> None:
		if self.session.autosave():
			self.output(f"Auto-saved to {self.session.default_path}")
		self.output("Exiting system...")

	def run(self, load_default: bool = True) -> int:
		if load_default and self.session.load_default():
			self.output(f"Loaded saved data from {self.session.default_path}")

		while True:
			self.output(MENU.format(status=self.session.store.summary()))
			try:
				raw = self._prompt("Select option: ")
			except EOFError:
				self.exit()
				return 0
			if not raw.isdecimal():
				self.output("Invalid input. Enter a number.")
				continue
			choice = int(raw)
			if choice == 9:
				self.exit()
				return 0
			action = self.actions.get(choice)
			if action is None:
				self.output("Invalid option.")
				continue
			try:
				action()
			except EOFError:
				self.exit()
				return 0
