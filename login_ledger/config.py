import os
from dataclasses import dataclass
from typing import List, Optional

import yaml


DEFAULT_ALERT_MESSAGE = "Multiple failed login attempts detected."


@dataclass
class LedgerConfig:
	failures_threshold: int = 3
	alert_message: str = DEFAULT_ALERT_MESSAGE
	data_file: str = "sld_system_data.txt"


CONFIG_PATH_CANDIDATES = [
	"/etc/login_ledger/config.yaml",
	os.path.expanduser("~/.config/login_ledger/config.yaml"),
]


def _load_yaml(path: str) -> dict:
	try:
		with open(path, "r", encoding="utf-8") as f:
			data = yaml.safe_load(f) or {}
	except FileNotFoundError:
		return {}
	except yaml.YAMLError as e:
		raise ValueError(f"Config file {path} is not valid YAML: {e}") from e
	if not isinstance(data, dict):
		raise ValueError(f"Config file {path} must contain a mapping")
	return data


def load_config(path: Optional[str] = None) -> LedgerConfig:
	cfg = LedgerConfig()
	candidates: List[str] = [path] if path else CONFIG_PATH_CANDIDATES
	for candidate in candidates:
		over = _load_yaml(candidate)
		if not over:
			continue
		if "failures_threshold" in over:
			cfg.failures_threshold = int(over["failures_threshold"])
		if "alert_message" in over:
			cfg.alert_message = str(over["alert_message"])
		if "data_file" in over:
			cfg.data_file = os.path.expanduser(str(over["data_file"]))
	if cfg.failures_threshold < 1:
		raise ValueError(f"failures_threshold must be positive, got {cfg.failures_threshold}")
	return cfg


DATA_DIR_DEFAULT = os.environ.get(
	"LOGIN_LEDGER_HOME",
	os.path.expanduser("~/.local/share/login_ledger"),
)


def ensure_data_dir(path: Optional[str] = None) -> str:
	target = path or DATA_DIR_DEFAULT
	os.makedirs(target, exist_ok=True)
	return target
