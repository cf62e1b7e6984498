import logging
import os
from logging.handlers import RotatingFileHandler
from typing import Optional

from .config import ensure_data_dir


class LedgerLogger:
    """Centralized logging for the login ledger"""

    def __init__(self, log_dir: Optional[str] = None):
        self.log_dir = log_dir or os.path.join(ensure_data_dir(), "logs")
        os.makedirs(self.log_dir, exist_ok=True)

        # Main ledger logger
        self.ledger_logger = logging.getLogger("login_ledger")
        self.ledger_logger.setLevel(logging.INFO)

        # Failed logins and generated alerts
        self.security_logger = logging.getLogger("login_ledger.security")
        self.security_logger.setLevel(logging.INFO)

        self._setup_handlers()

    def _setup_handlers(self):
        """Setup file handlers with rotation"""
        # Re-creating the logger must not stack duplicate handlers
        if self.ledger_logger.handlers:
            return

        # Main log file (rotates at 5MB, keeps 5 files)
        main_handler = RotatingFileHandler(
            os.path.join(self.log_dir, "ledger.log"),
            maxBytes=5*1024*1024,  # 5MB
            backupCount=5,
            encoding="utf-8",
        )
        main_handler.setFormatter(
            logging.Formatter(
                '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
            )
        )
        self.ledger_logger.addHandler(main_handler)

        # Security events log (rotates at 5MB, keeps 10 files)
        security_handler = RotatingFileHandler(
            os.path.join(self.log_dir, "security.log"),
            maxBytes=5*1024*1024,  # 5MB
            backupCount=10,
            encoding="utf-8",
        )
        security_handler.setFormatter(
            logging.Formatter(
                '%(asctime)s - SECURITY - %(levelname)s - %(message)s'
            )
        )
        self.security_logger.addHandler(security_handler)

        # Console only for errors, the shell prints everything else itself
        console_handler = logging.StreamHandler()
        console_handler.setLevel(logging.ERROR)
        console_handler.setFormatter(
            logging.Formatter(
                '%(asctime)s - %(levelname)s - %(message)s'
            )
        )
        self.ledger_logger.addHandler(console_handler)

    def info(self, message: str, **kwargs):
        """Log info message"""
        self.ledger_logger.info(message, extra=kwargs)

    def warning(self, message: str, **kwargs):
        """Log warning message"""
        self.ledger_logger.warning(message, extra=kwargs)

    def error(self, message: str, **kwargs):
        """Log error message"""
        self.ledger_logger.error(message, extra=kwargs)

    def security_event(self, event_type: str, ip: str, details: str, **kwargs):
        """Log security event"""
        message = f"{event_type} from {ip}: {details}"
        self.security_logger.info(message, extra=kwargs)

    def alert_event(self, ip: str, attempts: int, **kwargs):
        """Log alert generation"""
        message = f"ALERT for IP {ip} after {attempts} failed attempts"
        # propagates to the main log as well
        self.security_logger.warning(message, extra=kwargs)


# Global logger instance
logger = LedgerLogger()
