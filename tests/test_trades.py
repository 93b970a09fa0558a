"""Tests for trade listing, entry, editing, export and stats commands."""

from decimal import Decimal

import pytest

from tradejournal.cli.main import cli


@pytest.fixture
def imported(cli_runner, temp_db, fixtures_dir, sample_account):
    """Import the sample trades into the sample account."""
    result = cli_runner.invoke(
        cli,
        ["--db-path", temp_db.database_path, "--user", "test-user", "import",
         str(fixtures_dir / "sample_trades.csv"), "--account", "Test Broker", "--yes"],
    )
    assert result.exit_code == 0, result.output
    return sample_account


def _invoke(cli_runner, temp_db, *args):
    return cli_runner.invoke(
        cli, ["--db-path", temp_db.database_path, "--user", "test-user", *args]
    )


def test_trades_list(cli_runner, temp_db, imported):
    """Test that trades are listed newest first."""
    result = _invoke(cli_runner, temp_db, "trades", "list")

    assert result.exit_code == 0
    lines = [line for line in result.output.splitlines() if line.startswith("2024-")]
    assert [line.split()[1] for line in lines] == ["TSLA", "MSFT", "AAPL"]
    assert "Test Broker" in lines[0]


def test_trades_list_filters(cli_runner, temp_db, imported):
    result = _invoke(cli_runner, temp_db, "trades", "list", "--symbol", "msft", "--limit", "5")

    assert result.exit_code == 0
    assert "MSFT" in result.output
    assert "AAPL" not in result.output


def test_trades_list_empty(cli_runner, temp_db, sample_account):
    result = _invoke(cli_runner, temp_db, "trades", "list")

    assert result.exit_code == 0
    assert "No trades found." in result.output


def test_trades_export_can_be_reimported(cli_runner, temp_db, imported, second_account,
                                         account_service, tmp_path):
    """Test that an export imports cleanly into another account."""
    export_path = tmp_path / "export.csv"
    result = _invoke(cli_runner, temp_db, "trades", "export", "-o", str(export_path))
    assert result.exit_code == 0

    content = export_path.read_text()
    assert content.splitlines()[0].startswith("symbol,date,time,type,entry,exit,size")
    assert content.splitlines()[1].startswith("AAPL,2024-01-15,00:00:00,long")

    result = _invoke(
        cli_runner, temp_db, "import", str(export_path), "--account", "Prop Firm", "--yes"
    )
    assert result.exit_code == 0, result.output

    original = account_service.get_account(imported.id)
    copied = account_service.get_account(second_account.id)
    assert [t.pnl for t in copied.trades] == [t.pnl for t in original.trades]
    assert [t.date for t in copied.trades] == [t.date for t in original.trades]


def test_trades_export_to_stdout(cli_runner, temp_db, imported):
    result = _invoke(cli_runner, temp_db, "trades", "export", "--account", "Test Broker")

    assert result.exit_code == 0
    assert len(result.output.strip().splitlines()) == 4


def test_stats(cli_runner, temp_db, imported):
    """Test performance statistics output."""
    result = _invoke(cli_runner, temp_db, "stats")

    assert result.exit_code == 0
    assert "Total trades:    3" in result.output
    assert "Win rate:        66.7% (2W / 1L)" in result.output
    assert "Profit factor:   24.00" in result.output
    assert "Net P&L:         575.00" in result.output
    assert "Current streak:  1 loss" in result.output


def test_stats_unknown_account(cli_runner, temp_db, imported):
    result = _invoke(cli_runner, temp_db, "stats", "--account", "Prop Firm")

    assert result.exit_code == 1
    assert "not found" in result.output


def test_stats_no_trades(cli_runner, temp_db, sample_account):
    result = _invoke(cli_runner, temp_db, "stats", "--account", "Test Broker")

    assert result.exit_code == 0
    assert "No trades found." in result.output


def _add_args(*extra):
    return [
        "trades", "add", "ES", "--account", "Test Broker", "--date", "2024-01-15 14:30",
        "--type", "long", "--entry", "4800", "--exit", "4810", "--size", "2",
        "--commission", "1", *extra,
    ]


def test_trades_add(cli_runner, temp_db, sample_account, second_account, account_service):
    """Test that a hand-entered trade lands in every account given."""
    result = _invoke(cli_runner, temp_db, *_add_args("--account", "Prop Firm", "--rule", "A+"))

    assert result.exit_code == 0, result.output
    assert "Trade added to Test Broker, Prop Firm" in result.output
    assert "P&L: 98.00" in result.output
    account = account_service.get_account(sample_account.id)
    assert account.balance == Decimal("10098")
    assert account.trades[0].followed_rules == ("A+",)
    assert account.trades[0].date.to_datetime().hour == 14


def test_trades_add_invalid(cli_runner, temp_db, sample_account, account_service):
    result = _invoke(cli_runner, temp_db, *_add_args("--sl", "4900"))

    assert result.exit_code == 1
    assert "Error: Stop loss should be below entry price for long trades" in result.output
    assert account_service.get_account(sample_account.id).trades == ()


def test_trades_add_rejects_bad_number(cli_runner, temp_db, sample_account):
    result = _invoke(cli_runner, temp_db, *_add_args("--tp", "abc"))

    assert result.exit_code == 2
    assert "'abc' is not a valid number" in result.output


def test_trades_list_shows_trade_id(cli_runner, temp_db, sample_account, account_service):
    _invoke(cli_runner, temp_db, *_add_args())
    trade_id = account_service.get_account(sample_account.id).trades[0].id

    result = _invoke(cli_runner, temp_db, "trades", "list")

    assert trade_id[:8] in result.output


def test_trades_edit(cli_runner, temp_db, sample_account, account_service):
    """Test that editing the exit recalculates P&L and moves the balance."""
    _invoke(cli_runner, temp_db, *_add_args())
    trade_id = account_service.get_account(sample_account.id).trades[0].id

    result = _invoke(cli_runner, temp_db, "trades", "edit", trade_id[:8], "--exit", "4805",
                     "--notes", "cut early")

    assert result.exit_code == 0, result.output
    assert f"Updated trade {trade_id[:8]}" in result.output
    assert "P&L: 48.00" in result.output
    account = account_service.get_account(sample_account.id)
    assert account.balance == Decimal("10048")
    assert account.trades[0].notes == "cut early"


def test_trades_edit_requires_a_change(cli_runner, temp_db, sample_account, account_service):
    _invoke(cli_runner, temp_db, *_add_args())
    trade_id = account_service.get_account(sample_account.id).trades[0].id

    result = _invoke(cli_runner, temp_db, "trades", "edit", trade_id)

    assert result.exit_code == 1
    assert "Nothing to change" in result.output


def test_trades_edit_unknown_trade(cli_runner, temp_db, sample_account):
    result = _invoke(cli_runner, temp_db, "trades", "edit", "zzzz", "--exit", "1")

    assert result.exit_code == 1
    assert "Error: Trade zzzz not found" in result.output


def test_trades_delete(cli_runner, temp_db, sample_account, account_service):
    _invoke(cli_runner, temp_db, *_add_args())
    trade_id = account_service.get_account(sample_account.id).trades[0].id

    result = _invoke(cli_runner, temp_db, "trades", "delete", trade_id[:8], "--yes")

    assert result.exit_code == 0, result.output
    assert f"Deleted trade {trade_id[:8]} from 'Test Broker'" in result.output
    account = account_service.get_account(sample_account.id)
    assert account.trades == ()
    assert account.balance == Decimal("10000")


def test_trades_delete_cancelled(cli_runner, temp_db, sample_account, account_service):
    _invoke(cli_runner, temp_db, *_add_args())
    trade_id = account_service.get_account(sample_account.id).trades[0].id

    result = cli_runner.invoke(
        cli,
        ["--db-path", temp_db.database_path, "--user", "test-user",
         "trades", "delete", trade_id],
        input="n\n",
    )

    assert result.exit_code == 0
    assert "Deletion cancelled" in result.output
    assert len(account_service.get_account(sample_account.id).trades) == 1
