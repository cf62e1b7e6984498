"""
In-memory ledger of login attempts and the alerts they trigger.

Failed attempts are counted per source IP. When the count for an IP reaches
the threshold exactly, one alert is queued for review. Alerts leave the
backlog in FIFO order when dismissed and go onto an undo history; undoing
pops the most recent dismissal and re-queues it at the tail of the backlog.
"""

from collections import defaultdict, deque
from dataclasses import dataclass
from typing import Callable, Deque, Dict, Iterable, Iterator, List, Optional

from .config import DEFAULT_ALERT_MESSAGE
from .logger import logger
from .models import Alert, LoginAttempt

DEFAULT_THRESHOLD = 3


class UndoHistory:
	"""LIFO stack of dismissed alerts."""

	def __init__(self, alerts: Iterable[Alert] = ()) -> None:
		self._items: List[Alert] = []
		for alert in alerts:
			self.push(alert)

	def push(self, alert: Alert) -> None:
		self._items.append(alert)

	def pop(self) -> Optional[Alert]:
		if not self._items:
			return None
		return self._items.pop()

	def peek(self) -> Optional[Alert]:
		return self._items[-1] if self._items else None

	def bottom_to_top(self) -> Iterator[Alert]:
		"""Oldest dismissal first; pushing in this order rebuilds the stack."""
		return iter(tuple(self._items))

	def __len__(self) -> int:
		return len(self._items)

	def __bool__(self) -> bool:
		return bool(self._items)


@dataclass(frozen=True)
class LedgerSummary:
	event_count: int
	pending_alert_count: int
	dismissed_count: int

	def __str__(self) -> str:
		return (
			f"Logs={self.event_count} | Alerts pending={self.pending_alert_count} "
			f"| Dismissed={self.dismissed_count}"
		)


class LedgerStore:
	def __init__(
		self,
		threshold: int = DEFAULT_THRESHOLD,
		alert_message: str = DEFAULT_ALERT_MESSAGE,
		on_alert: Optional[Callable[[Alert], None]] = None,
	) -> None:
		if threshold < 1:
			raise ValueError(f"threshold must be positive, got {threshold}")
		self.threshold = threshold
		self.alert_message = alert_message
		self.on_alert = on_alert
		self._events: List[LoginAttempt] = []
		self._failures: Dict[str, int] = defaultdict(int)
		self._backlog: Deque[Alert] = deque()
		self._dismissed = UndoHistory()

	@classmethod
	def from_state(
		cls,
		events: Iterable[LoginAttempt] = (),
		failures: Optional[Dict[str, int]] = None,
		backlog: Iterable[Alert] = (),
		dismissed: Iterable[Alert] = (),
		**kwargs,
	) -> "LedgerStore":
		"""Hydrate a store wholesale; dismissed is given bottom to top."""
		store = cls(**kwargs)
		store._events.extend(events)
		store._failures.update(failures or {})
		store._backlog.extend(backlog)
		store._dismissed = UndoHistory(dismissed)
		return store

	def record_attempt(self, username: str, ip_address: str, timestamp: str, success: bool) -> Optional[Alert]:
		"""
		Append a login attempt and apply the threshold rule.

		Returns the alert created by this attempt, if any.
		"""
		self._events.append(LoginAttempt(username, ip_address, timestamp, success))
		if success:
			logger.info(f"Successful login recorded for {username!r} from {ip_address}")
			return None

		self._failures[ip_address] += 1
		count = self._failures[ip_address]
		logger.security_event("FAILED_LOGIN", ip_address, f"User: {username} ({count} failed)")
		if count != self.threshold:
			return None

		alert = Alert(ip_address, self.alert_message, timestamp)
		self._backlog.append(alert)
		logger.alert_event(ip_address, count)
		if self.on_alert is not None:
			self.on_alert(alert)
		return alert

	def list_events(self) -> List[LoginAttempt]:
		return list(self._events)

	def sort_by_identity(self) -> bool:
		"""
		Bubble sort the log by username, case-insensitive.

		Only strictly greater neighbours are swapped, which keeps the sort
		stable. Returns False when there is nothing to sort.
		"""
		events = self._events
		n = len(events)
		if n < 2:
			return False
		for i in range(n - 1):
			swapped = False
			for j in range(n - i - 1):
				if events[j].sort_key > events[j + 1].sort_key:
					events[j], events[j + 1] = events[j + 1], events[j]
					swapped = True
			if not swapped:
				break
		logger.info(f"Sorted {n} login attempts by username")
		return True

	def list_backlog(self) -> List[Alert]:
		return list(self._backlog)

	def list_dismissed(self) -> List[Alert]:
		return list(self._dismissed.bottom_to_top())

	def failure_count(self, ip_address: str) -> int:
		return self._failures.get(ip_address, 0)

	def failure_counts(self) -> Dict[str, int]:
		return dict(self._failures)

	def dismiss_next(self) -> Optional[Alert]:
		if not self._backlog:
			return None
		alert = self._backlog.popleft()
		self._dismissed.push(alert)
		logger.info(f"Alert dismissed for IP {alert.ip_address}")
		return alert

	def undo_last_dismissal(self) -> Optional[Alert]:
		alert = self._dismissed.pop()
		if alert is None:
			return None
		# re-queued at the tail, not its original position
		self._backlog.append(alert)
		logger.info(f"Alert restored for IP {alert.ip_address}")
		return alert

	def has_data(self) -> bool:
		return bool(self._events or self._failures or self._backlog or self._dismissed)

	def summary(self) -> LedgerSummary:
		return LedgerSummary(
			event_count=len(self._events),
			pending_alert_count=len(self._backlog),
			dismissed_count=len(self._dismissed),
		)
