import os
import tempfile

import pytest

# keep log files out of the user's home; must run before login_ledger is imported
os.environ.setdefault("LOGIN_LEDGER_HOME", tempfile.mkdtemp(prefix="login_ledger_test_"))

from login_ledger.config import LedgerConfig  # noqa: E402
from login_ledger.ledger import LedgerStore  # noqa: E402


@pytest.fixture
def store():
    return LedgerStore()


@pytest.fixture
def cfg(tmp_path):
    return LedgerConfig(data_file=str(tmp_path / "ledger.txt"))
