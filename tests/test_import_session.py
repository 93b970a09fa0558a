"""Tests for the import session state machine."""

from decimal import Decimal

import pytest

from tradejournal.domain import import_session as steps
from tradejournal.domain.entities import ImportDefaults, ImportStep
from tradejournal.domain.errors import (
    MalformedInputError,
    MissingRequiredMappingError,
    ValidationError,
)
from tradejournal.domain.notifications import ERROR, SUCCESS, WARNING, LoggingNotifier

AAPL_CSV = "Symbol,Date,Type,Entry,Exit,Size\nAAPL,01/15/2024,Long,100,110,10\n"


def _processed(content, notifier=None, defaults=None):
    session = steps.ImportSession()
    if defaults is not None:
        session = steps.set_defaults(session, defaults)
    session = steps.auto_map(steps.upload(session, content))
    return steps.process(session, notifier)


class TestUpload:
    """Tests for the upload step."""

    def test_upload_moves_to_map(self):
        session = steps.upload(steps.ImportSession(), AAPL_CSV)

        assert session.step == ImportStep.MAP
        assert session.headers == ("Symbol", "Date", "Type", "Entry", "Exit", "Size")
        assert len(session.parsed.rows) == 1

    def test_empty_content(self):
        with pytest.raises(MalformedInputError) as excinfo:
            steps.upload(steps.ImportSession(), "   ")

        assert "Please paste some CSV content first" in str(excinfo.value)

    def test_malformed_header(self):
        with pytest.raises(MalformedInputError):
            steps.upload(steps.ImportSession(), ",,,\n1,2,3\n")

    def test_upload_twice_is_rejected(self):
        session = steps.upload(steps.ImportSession(), AAPL_CSV)

        with pytest.raises(ValidationError):
            steps.upload(session, AAPL_CSV)


class TestMapping:
    """Tests for the map step."""

    def test_map_column_returns_new_session(self):
        session = steps.upload(steps.ImportSession(), AAPL_CSV)
        mapped = steps.map_column(session, "symbol", "Symbol")

        assert mapped.mappings == {"symbol": "Symbol"}
        assert session.mappings == {}

    def test_unmap(self):
        session = steps.upload(steps.ImportSession(), AAPL_CSV)
        session = steps.map_column(session, "symbol", "Symbol")
        session = steps.map_column(session, "symbol", None)

        assert "symbol" not in session.mappings

    def test_missing_required_mapping(self):
        session = steps.upload(steps.ImportSession(), AAPL_CSV)
        session = steps.map_column(session, "symbol", "Symbol")

        with pytest.raises(MissingRequiredMappingError) as excinfo:
            steps.process(session)

        assert excinfo.value.missing == ["date", "type", "entry", "exit", "size"]
        assert "Missing required column mappings" in str(excinfo.value)

    def test_header_only_csv_has_no_trades(self):
        session = steps.auto_map(
            steps.upload(steps.ImportSession(), "Symbol,Date,Type,Entry,Exit,Size\n")
        )

        with pytest.raises(ValidationError) as excinfo:
            steps.process(session)

        assert "No trades found in CSV" in str(excinfo.value)


class TestProcess:
    """Tests for transforming and validating rows."""

    def test_valid_rows(self, notifier):
        session = _processed(AAPL_CSV, notifier)

        assert session.step == ImportStep.VALIDATE
        assert len(session.valid_trades) == 1
        trade = session.valid_trades[0]
        assert trade.symbol == "AAPL"
        assert trade.pnl == Decimal("500")
        assert trade.market_type == "futures"
        assert trade.tick_value == Decimal("5")
        assert notifier.notifications == [(SUCCESS, "All 1 trades are valid", None)]

    def test_invalid_rows_are_reported(self, fixtures_dir, notifier):
        content = (fixtures_dir / "sample_trades_invalid.csv").read_text()

        session = _processed(content, notifier)

        assert session.step == ImportStep.VALIDATE
        assert [t.symbol for t in session.valid_trades] == ["AAPL"]
        assert [e.row for e in session.validation.errors] == [3, 4]
        assert session.validation.errors[0].errors == (
            "Invalid date format",
            "Entry price must be greater than zero",
        )
        assert notifier.kinds == [WARNING]
        assert notifier.notifications[0][1] == "2 trade(s) have validation issues"

    def test_defaults_apply_to_unmapped_fields(self):
        defaults = ImportDefaults(
            commission=Decimal("1"), market_type="forex", pip_value=Decimal("10")
        )
        content = "Symbol,Date,Type,Entry,Exit,Size\nEURUSD,2024-01-15,buy,1.1000,1.1010,1\n"

        trade = _processed(content, defaults=defaults).valid_trades[0]

        assert trade.market_type == "forex"
        assert trade.commission == Decimal("1")
        assert trade.tick_value is None
        assert trade.pnl == Decimal("99")

    def test_mapped_optional_fields(self):
        content = (
            "Symbol,Date,Time,Type,Entry,Exit,Size,Market,Notes\n"
            "es,2024-01-15,15:45:00,sell,4810,4800,1,fut,Faded the open\n"
        )
        session = steps.auto_map(steps.upload(steps.ImportSession(), content))
        session = steps.map_column(session, "marketType", "Market")

        trade = steps.process(session).valid_trades[0]

        assert trade.symbol == "ES"
        assert trade.exit_time == "15:45:00"
        assert trade.notes == "Faded the open"
        assert trade.pnl == Decimal("50")

    def test_logging_notifier(self, caplog):
        with caplog.at_level("INFO", logger="tradejournal.notifications"):
            _processed(AAPL_CSV, LoggingNotifier())

        assert "All 1 trades are valid" in caplog.text


class TestConfirm:
    """Tests for committing an import session."""

    def test_full_flow(self, sample_account, second_account, trade_import_service,
                       account_service, notifier, fixtures_dir):
        content = (fixtures_dir / "sample_trades.csv").read_text()
        session = _processed(content, notifier)
        session = steps.select_accounts(session, [sample_account.id, second_account.id])
        session = steps.proceed_to_confirm(session)

        assert session.step == ImportStep.CONFIRM

        session = steps.confirm(session, trade_import_service, notifier)

        assert session.step == ImportStep.DONE
        assert session.result.imported == 3
        assert session.result.trades_created == 6
        assert session.result.total_pnl == Decimal("575")
        assert notifier.notifications[-1] == (
            SUCCESS,
            "3 trades imported successfully",
            "Added to Test Broker, Prop Firm",
        )
        first = account_service.get_account(sample_account.id)
        second = account_service.get_account(second_account.id)
        assert len(first.trades) == 3
        assert len(second.trades) == 3
        assert first.balance == Decimal("10575")
        assert second.balance == Decimal("50575")
        assert {t.id for t in first.trades}.isdisjoint({t.id for t in second.trades})

    def test_no_valid_trades_cannot_proceed(self):
        content = "Symbol,Date,Type,Entry,Exit,Size\nAAPL,01/15/2024,Long,0,110,10\n"
        session = _processed(content)

        with pytest.raises(ValidationError) as excinfo:
            steps.proceed_to_confirm(session)

        assert "No valid trades found" in str(excinfo.value)

    def test_failure_stays_on_confirm(self, trade_import_service, sample_account, notifier,
                                      account_service):
        session = steps.proceed_to_confirm(
            steps.select_accounts(_processed(AAPL_CSV), ["missing-account"])
        )

        result = steps.confirm(session, trade_import_service, notifier)

        assert result is session
        assert result.step == ImportStep.CONFIRM
        assert notifier.kinds == [ERROR]
        assert notifier.notifications[0][1] == "Failed to import trades"
        assert account_service.get_account(sample_account.id).trades == ()

    def test_no_accounts_reports_error(self, trade_import_service, notifier):
        session = steps.proceed_to_confirm(
            steps.select_accounts(_processed(AAPL_CSV), ["anything"])
        )

        result = steps.confirm(session, trade_import_service, notifier)

        assert result.step == ImportStep.CONFIRM
        assert "No trading accounts found" in notifier.notifications[0][2]

    def test_select_accounts_deduplicates(self):
        session = steps.select_accounts(_processed(AAPL_CSV), ["a", "b", "a"])

        assert session.selected_accounts == ("a", "b")


class TestBack:
    """Tests for stepping back."""

    def test_back_from_validate_keeps_mappings(self):
        session = _processed(AAPL_CSV)

        previous = steps.back(session)

        assert previous.step == ImportStep.MAP
        assert previous.mappings == session.mappings
        assert steps.process(previous).step == ImportStep.VALIDATE

    def test_back_from_confirm(self):
        session = steps.proceed_to_confirm(_processed(AAPL_CSV))

        assert steps.back(session).step == ImportStep.VALIDATE

    def test_back_to_upload_resets_data_but_keeps_defaults(self):
        defaults = ImportDefaults(commission=Decimal("2"))
        session = steps.upload(steps.set_defaults(steps.ImportSession(), defaults), AAPL_CSV)

        previous = steps.back(session)

        assert previous.step == ImportStep.UPLOAD
        assert previous.parsed is None
        assert previous.defaults == defaults

    def test_cannot_go_back_from_upload(self):
        with pytest.raises(ValidationError):
            steps.back(steps.ImportSession())
