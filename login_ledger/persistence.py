"""
Save and load the full ledger state as a flat text file.

Each line is one record, a tag followed by delimited fields:

    L|username|ip|timestamp|true/false    login attempt, in log order
    F|ip|count                            failed-attempt counter
    A|ip|message|timestamp                pending alert, queue head first
    D|ip|message|timestamp                dismissed alert, stack bottom first

Free-text fields are escaped with login_ledger.codec. Readers do not rely on
the lines being grouped by tag.
"""

import contextlib
import os
import tempfile
from typing import Dict, Iterable, Iterator, List

from .codec import encode_record, split_fields, unescape
from .ledger import LedgerStore
from .logger import logger
from .models import Alert, LoginAttempt

TAG_LOGIN = "L"
TAG_FAILURES = "F"
TAG_ALERT = "A"
TAG_DISMISSED = "D"

# tag plus fields
MIN_FIELDS = {
	TAG_LOGIN: 5,
	TAG_FAILURES: 3,
	TAG_ALERT: 4,
	TAG_DISMISSED: 4,
}


class LedgerError(Exception):
	"""Base error for the login ledger."""


class PersistenceError(LedgerError):
	"""Reading or writing the data file failed."""

	def __init__(self, message: str, path: str) -> None:
		super().__init__(message)
		self.path = path


def dump_lines(store: LedgerStore) -> Iterator[str]:
	for attempt in store.list_events():
		yield encode_record(
			TAG_LOGIN,
			attempt.username,
			attempt.ip_address,
			attempt.timestamp,
			"true" if attempt.success else "false",
		)
	for ip, count in store.failure_counts().items():
		yield encode_record(TAG_FAILURES, ip, str(count))
	for alert in store.list_backlog():
		yield encode_record(TAG_ALERT, alert.ip_address, alert.message, alert.timestamp)
	for alert in store.list_dismissed():
		yield encode_record(TAG_DISMISSED, alert.ip_address, alert.message, alert.timestamp)


def _parse_count(raw: str) -> int:
	# only what dump_lines writes: plain ASCII digits
	if not (raw.isascii() and raw.isdigit()):
		raise ValueError(f"not a decimal count: {raw!r}")
	return int(raw)


def parse_lines(lines: Iterable[str], **store_kwargs) -> LedgerStore:
	"""
	Build a new store from record lines.

	Blank lines, unknown tags and lines with too few fields are skipped.
	A malformed F count skips that line rather than storing a wrong value.
	"""
	events: List[LoginAttempt] = []
	failures: Dict[str, int] = {}
	backlog: List[Alert] = []
	dismissed: List[Alert] = []

	for lineno, line in enumerate(lines, start=1):
		line = line.rstrip("\r\n")
		if not line.strip():
			continue
		parts = split_fields(line)
		tag = parts[0]
		needed = MIN_FIELDS.get(tag)
		if needed is None:
			logger.warning(f"Skipping line {lineno}: unknown tag {tag!r}")
			continue
		if len(parts) < needed:
			logger.warning(f"Skipping line {lineno}: expected {needed} fields for {tag}, got {len(parts)}")
			continue

		if tag == TAG_LOGIN:
			events.append(LoginAttempt(
				username=unescape(parts[1]),
				ip_address=unescape(parts[2]),
				timestamp=unescape(parts[3]),
				success=unescape(parts[4]).strip().lower() == "true",
			))
		elif tag == TAG_FAILURES:
			try:
				count = _parse_count(unescape(parts[2]))
			except ValueError as e:
				logger.warning(f"Skipping line {lineno}: bad failure count: {e}")
				continue
			failures[unescape(parts[1])] = count
		else:
			alert = Alert(
				ip_address=unescape(parts[1]),
				message=unescape(parts[2]),
				timestamp=unescape(parts[3]),
			)
			if tag == TAG_ALERT:
				backlog.append(alert)
			else:
				dismissed.append(alert)

	return LedgerStore.from_state(events, failures, backlog, dismissed, **store_kwargs)


def save_ledger(store: LedgerStore, path: str) -> None:
	"""
	Write the store to path, overwriting any existing file.

	The data goes to a temporary file next to path first, so a failed save
	leaves the previous file intact.
	"""
	tmp_path = None
	try:
		parent = os.path.dirname(os.path.abspath(path))
		os.makedirs(parent, exist_ok=True)
		fd, tmp_path = tempfile.mkstemp(prefix=".ledger-", suffix=".tmp", dir=parent)
		with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as f:
			for line in dump_lines(store):
				f.write(line + "\n")
		os.replace(tmp_path, path)
	except (OSError, UnicodeError) as e:
		if tmp_path is not None:
			with contextlib.suppress(FileNotFoundError):
				os.remove(tmp_path)
		logger.warning(f"Failed to save ledger to {path}: {e}")
		raise PersistenceError(f"Error saving file: {e}", path) from e
	logger.info(f"Saved ledger to {path} ({store.summary()})")


def load_ledger(path: str, **store_kwargs) -> LedgerStore:
	"""Read a store from path. The caller's current store is never touched."""
	try:
		with open(path, "r", encoding="utf-8") as f:
			store = parse_lines(f, **store_kwargs)
	except (OSError, UnicodeDecodeError) as e:
		raise PersistenceError(f"Error loading file: {e}", path) from e
	logger.info(f"Loaded ledger from {path} ({store.summary()})")
	return store
