import sys

from .config import load_config
from .logger import logger
from .session import LedgerSession
from .shell import LedgerShell


def main() -> int:
	try:
		cfg = load_config()
	except ValueError as e:
		print(f"Invalid configuration: {e}")
		return 1

	logger.info("Starting login ledger shell")
	logger.info(f"Configuration loaded: alert after {cfg.failures_threshold} failures, data file {cfg.data_file}")

	return LedgerShell(LedgerSession(cfg)).run()


if __name__ == "__main__":
	sys.exit(main())
