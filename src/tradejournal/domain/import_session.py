"""Import session state machine.

An ImportSession is an immutable snapshot of one bulk import. Every
transition function takes the current session and returns a new one, so
the pipeline can be driven (and tested) without any user interface::

    session = upload(ImportSession(), content)
    session = map_column(session, "symbol", "Ticker")
    ...
    session = process(session)
    session = proceed_to_confirm(select_accounts(session, [account_id]))
    session = confirm(session, TradeImportService(db, user_id), notifier)

Steps only move forward (upload -> map -> validate -> confirm -> done),
except for explicit back() transitions. Nothing is written before confirm().
"""

import dataclasses
import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional, Sequence

from tradejournal.domain.column_mapping import ColumnMapping
from tradejournal.domain.entities import (
    ImportDefaults,
    ImportResult,
    ImportStep,
    Trade,
    ValidationResult,
)
from tradejournal.domain.errors import (
    DomainError,
    MalformedInputError,
    MissingRequiredMappingError,
    ValidationError,
)
from tradejournal.domain.notifications import ERROR, SUCCESS, WARNING, Notifier
from tradejournal.domain.trade_builder import build_candidate_trades
from tradejournal.domain.trade_import import TradeImportService
from tradejournal.domain.validation import validate_trades
from tradejournal.utils.csv_parser import ParsedCSV, parse_csv_content

logger = logging.getLogger(__name__)

_PREVIOUS_STEP = {
    ImportStep.MAP: ImportStep.UPLOAD,
    ImportStep.VALIDATE: ImportStep.MAP,
    ImportStep.CONFIRM: ImportStep.VALIDATE,
}


@dataclass(frozen=True)
class ImportSession:
    """State of a single bulk import."""

    step: ImportStep = ImportStep.UPLOAD
    parsed: Optional[ParsedCSV] = None
    mappings: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    defaults: ImportDefaults = field(default_factory=ImportDefaults)
    candidates: tuple[Trade, ...] = ()
    validation: Optional[ValidationResult] = None
    selected_accounts: tuple[str, ...] = ()
    result: Optional[ImportResult] = None

    @property
    def headers(self) -> tuple[str, ...]:
        return self.parsed.headers if self.parsed is not None else ()

    @property
    def column_mapping(self) -> ColumnMapping:
        """Editable copy of the current mappings."""
        return ColumnMapping(self.mappings, headers=self.headers)

    @property
    def valid_trades(self) -> tuple[Trade, ...]:
        return self.validation.valid_trades if self.validation is not None else ()


def _require_step(session: ImportSession, *steps: ImportStep) -> None:
    if session.step not in steps:
        expected = " or ".join(s.value for s in steps)
        raise ValidationError(
            f"Import is at the '{session.step.value}' step, expected {expected}"
        )


def upload(session: ImportSession, content: str) -> ImportSession:
    """Parse CSV content and move to the mapping step.

    Raises:
        ValidationError: If the session is past upload
        MalformedInputError: If content is empty or has no parsable header line
    """
    _require_step(session, ImportStep.UPLOAD)
    if not content or not content.strip():
        raise MalformedInputError("Please paste some CSV content first")

    parsed = parse_csv_content(content)
    logger.debug("Parsed CSV with %d columns and %d rows", len(parsed.headers), len(parsed.rows))
    return dataclasses.replace(
        session,
        step=ImportStep.MAP,
        parsed=parsed,
        mappings=MappingProxyType({}),
        candidates=(),
        validation=None,
    )


def map_column(session: ImportSession, field_id: str, column: Optional[str]) -> ImportSession:
    """Map (or with an empty column, unmap) one target field."""
    _require_step(session, ImportStep.MAP)
    mapping = session.column_mapping
    mapping.set(field_id, column)
    return dataclasses.replace(session, mappings=mapping.freeze())


def apply_mapping(session: ImportSession, mapping: ColumnMapping) -> ImportSession:
    """Replace all mappings at once, e.g. from a saved import format."""
    _require_step(session, ImportStep.MAP)
    checked = ColumnMapping(mapping.freeze(), headers=session.headers)
    return dataclasses.replace(session, mappings=checked.freeze())


def auto_map(session: ImportSession) -> ImportSession:
    """Map every field whose name matches a CSV header."""
    _require_step(session, ImportStep.MAP)
    return apply_mapping(session, ColumnMapping.auto_detect(session.headers))


def set_defaults(session: ImportSession, defaults: ImportDefaults) -> ImportSession:
    """Set default values used for unmapped numeric fields."""
    _require_step(session, ImportStep.UPLOAD, ImportStep.MAP)
    return dataclasses.replace(session, defaults=defaults)


def process(session: ImportSession, notifier: Optional[Notifier] = None) -> ImportSession:
    """Transform and validate every row, then move to the validation step.

    Raises:
        MissingRequiredMappingError: If a required field is not mapped
        ValidationError: If the CSV has no data rows
    """
    _require_step(session, ImportStep.MAP)
    missing = session.column_mapping.missing_required()
    if missing:
        raise MissingRequiredMappingError(missing)
    if not session.parsed.rows:
        raise ValidationError("No trades found in CSV")

    candidates = build_candidate_trades(session.parsed.rows, session.mappings, session.defaults)
    validation = validate_trades(candidates)

    if notifier is not None:
        if validation.errors:
            notifier.notify(
                WARNING,
                f"{len(validation.errors)} trade(s) have validation issues",
                "Please review and fix the issues before importing",
            )
        else:
            notifier.notify(SUCCESS, f"All {len(validation.valid_trades)} trades are valid")

    return dataclasses.replace(
        session,
        step=ImportStep.VALIDATE,
        candidates=tuple(candidates),
        validation=validation,
    )


def select_accounts(session: ImportSession, account_ids: Sequence[str]) -> ImportSession:
    """Choose the accounts the valid trades will be added to."""
    _require_step(session, ImportStep.VALIDATE, ImportStep.CONFIRM)
    unique_ids = tuple(dict.fromkeys(account_ids))
    return dataclasses.replace(session, selected_accounts=unique_ids)


def proceed_to_confirm(session: ImportSession) -> ImportSession:
    """Move from validation to confirmation.

    Raises:
        ValidationError: If there are no valid trades
    """
    _require_step(session, ImportStep.VALIDATE)
    if not session.valid_trades:
        raise ValidationError("No valid trades found")
    return dataclasses.replace(session, step=ImportStep.CONFIRM)


def confirm(
    session: ImportSession, service: TradeImportService, notifier: Notifier
) -> ImportSession:
    """Commit the valid trades to the selected accounts.

    Failures are reported through the notifier and leave the session at the
    confirm step so the user can retry; success ends the session.
    """
    _require_step(session, ImportStep.CONFIRM)
    try:
        result = service.commit(session.valid_trades, session.selected_accounts)
    except DomainError as e:
        notifier.notify(ERROR, "Failed to import trades", str(e))
        return session

    notifier.notify(
        SUCCESS,
        f"{result.imported} trades imported successfully",
        f"Added to {', '.join(result.accounts_updated)}",
    )
    return dataclasses.replace(session, step=ImportStep.DONE, result=result)


def back(session: ImportSession) -> ImportSession:
    """Return to the previous step, keeping the data gathered so far."""
    previous = _PREVIOUS_STEP.get(session.step)
    if previous is None:
        raise ValidationError(f"Cannot go back from the '{session.step.value}' step")
    if previous == ImportStep.UPLOAD:
        return ImportSession(defaults=session.defaults)
    return dataclasses.replace(session, step=previous)
