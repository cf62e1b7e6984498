from dataclasses import dataclass
from typing import Optional

from .config import LedgerConfig, load_config
from .ledger import LedgerStore
from .logger import logger
from .persistence import PersistenceError, load_ledger, save_ledger


@dataclass(frozen=True)
class ActionResult:
	status: str  # "ok" or "error"
	message: str

	@property
	def ok(self) -> bool:
		return self.status == "ok"

	def __str__(self) -> str:
		return self.message


class LedgerSession:
	"""Owns the one ledger store of a run and its save/load lifecycle."""

	def __init__(self, cfg: Optional[LedgerConfig] = None, store: Optional[LedgerStore] = None) -> None:
		self.cfg = cfg or load_config()
		self.store = store or self.new_store()

	def new_store(self) -> LedgerStore:
		return LedgerStore(
			threshold=self.cfg.failures_threshold,
			alert_message=self.cfg.alert_message,
		)

	@property
	def default_path(self) -> str:
		return self.cfg.data_file

	def save(self, path: Optional[str] = None) -> ActionResult:
		target = path or self.default_path
		try:
			save_ledger(self.store, target)
		except PersistenceError as e:
			return ActionResult("error", str(e))
		return ActionResult("ok", f"Saved to {target}")

	def load(self, path: Optional[str] = None) -> ActionResult:
		"""Replace the current store with the file contents, or keep it on failure."""
		target = path or self.default_path
		try:
			loaded = load_ledger(
				target,
				threshold=self.cfg.failures_threshold,
				alert_message=self.cfg.alert_message,
			)
		except PersistenceError as e:
			return ActionResult("error", str(e))
		loaded.on_alert = self.store.on_alert
		self.store = loaded
		return ActionResult("ok", f"Loaded from {target}")

	def load_default(self) -> bool:
		"""Start-up hydration; a missing or unreadable file means no data yet."""
		result = self.load()
		if not result.ok:
			logger.info(f"No saved data loaded from {self.default_path}: {result.message}")
		return result.ok

	def autosave(self) -> bool:
		"""Best-effort save on exit."""
		result = self.save()
		if not result.ok:
			logger.warning(f"Auto-save to {self.default_path} failed: {result.message}")
		return result.ok
