"""Shared pytest fixtures for tradejournal tests."""

import tempfile
import os
from decimal import Decimal
from pathlib import Path
import pytest

from tradejournal.database.factories import create_sqlite_database
from tradejournal.domain.account import AccountService
from tradejournal.domain.import_format import ImportFormatService
from tradejournal.domain.trade_import import TradeImportService
from tradejournal.domain.stats import StatsService

TEST_USER = "test-user"


class RecordingNotifier:
    """Notifier that keeps every notification for assertions."""

    def __init__(self):
        self.notifications = []

    def notify(self, kind, message, description=None):
        self.notifications.append((kind, message, description))

    @property
    def kinds(self):
        return [kind for kind, _, _ in self.notifications]


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    # Create a temporary file for the database
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    # Create database
    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    # Cleanup
    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def user_id():
    return TEST_USER


@pytest.fixture
def account_service(temp_db, user_id):
    """Create an AccountService with a temporary database."""
    return AccountService(temp_db, user_id)


@pytest.fixture
def import_format_service(temp_db):
    """Create an ImportFormatService with a temporary database."""
    return ImportFormatService(temp_db)


@pytest.fixture
def trade_import_service(temp_db, user_id):
    """Create a TradeImportService with a temporary database."""
    return TradeImportService(temp_db, user_id)


@pytest.fixture
def stats_service(temp_db, user_id):
    """Create a StatsService with a temporary database."""
    return StatsService(temp_db, user_id)


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def sample_account(account_service):
    """Create a sample account for testing."""
    account_id = account_service.create_account(
        broker="Test Broker", account_type="real", balance=Decimal("10000")
    )
    return account_service.get_account(account_id)


@pytest.fixture
def second_account(account_service):
    """Create a second account for multi-account imports."""
    account_id = account_service.create_account(
        broker="Prop Firm", account_type="prop", balance=Decimal("50000")
    )
    return account_service.get_account(account_id)


@pytest.fixture
def sample_import_format(import_format_service):
    """Create a sample import format with broker-style column names."""
    format_id = import_format_service.create_format(name="Broker Export")

    import_format_service.set_mapping(format_id, "Instrument", "symbol")
    import_format_service.set_mapping(format_id, "Trade Date", "date")
    import_format_service.set_mapping(format_id, "Side", "type")
    import_format_service.set_mapping(format_id, "Entry Price", "entry")
    import_format_service.set_mapping(format_id, "Exit Price", "exit")
    import_format_service.set_mapping(format_id, "Qty", "size")
    import_format_service.set_mapping(format_id, "Fees", "commission")

    return import_format_service.get_format(format_id)


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()


@pytest.fixture
def fixtures_dir():
    """Return the path to the test fixtures directory."""
    return Path(__file__).parent / "fixtures"
