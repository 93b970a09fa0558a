"""Column mapping from CSV source columns to trade target fields."""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterable, Mapping, Optional

from tradejournal.domain.errors import ValidationError


@dataclass(frozen=True)
class TargetField:
    """Trade attribute a CSV column can be mapped onto."""

    id: str
    label: str
    required: bool = False


TARGET_FIELDS: tuple[TargetField, ...] = (
    TargetField("symbol", "Symbol", required=True),
    TargetField("date", "Date", required=True),
    TargetField("time", "Time"),
    TargetField("type", "Direction (Long/Short)", required=True),
    TargetField("entry", "Entry Price", required=True),
    TargetField("exit", "Exit Price", required=True),
    TargetField("size", "Position Size", required=True),
    TargetField("tp", "Take Profit Price"),
    TargetField("sl", "Stop Loss Price"),
    TargetField("marketType", "Market Type"),
    TargetField("commission", "Commission"),
    TargetField("tickValue", "Tick Value"),
    TargetField("pipValue", "Pip Value"),
    TargetField("notes", "Notes"),
)

TARGET_FIELD_IDS = tuple(f.id for f in TARGET_FIELDS)
REQUIRED_FIELD_IDS = tuple(f.id for f in TARGET_FIELDS if f.required)


def check_target_field(field_id: str) -> None:
    """Raise ValidationError if field_id is not a known target field."""
    if field_id not in TARGET_FIELD_IDS:
        raise ValidationError(
            f"Invalid target field '{field_id}'. "
            f"Must be one of: {', '.join(TARGET_FIELD_IDS)}"
        )


class ColumnMapping:
    """Mutable mapping of target field id to CSV column name."""

    def __init__(
        self,
        mappings: Optional[Mapping[str, str]] = None,
        headers: Optional[Iterable[str]] = None,
    ):
        """Initialize column mapping.

        Args:
            mappings: Optional initial target field -> column mappings
            headers: Optional CSV headers; when given, mapped columns must exist
        """
        self.headers = tuple(headers) if headers is not None else None
        self._mappings: dict[str, str] = {}
        for field_id, column in (mappings or {}).items():
            self.set(field_id, column)

    @classmethod
    def auto_detect(cls, headers: Iterable[str]) -> "ColumnMapping":
        """Build a mapping from headers named like a field id or label."""
        headers = tuple(headers)
        by_name = {}
        for header in headers:
            by_name.setdefault(header.strip().lower(), header)

        mapping = cls(headers=headers)
        for target in TARGET_FIELDS:
            for candidate in (target.id.lower(), target.label.lower()):
                if candidate in by_name:
                    mapping.set(target.id, by_name[candidate])
                    break
        return mapping

    def set(self, field_id: str, column: Optional[str]) -> None:
        """Map a target field to a CSV column; an empty column unmaps it."""
        check_target_field(field_id)
        if not column:
            self._mappings.pop(field_id, None)
            return
        if self.headers is not None and column not in self.headers:
            raise ValidationError(f"CSV has no column named '{column}'")
        self._mappings[field_id] = column

    def unset(self, field_id: str) -> None:
        check_target_field(field_id)
        self._mappings.pop(field_id, None)

    def get(self, field_id: str) -> Optional[str]:
        return self._mappings.get(field_id)

    def is_mapped(self, field_id: str) -> bool:
        return field_id in self._mappings

    def missing_required(self) -> list[str]:
        """Return required field ids that are not yet mapped, in field order."""
        return [f for f in REQUIRED_FIELD_IDS if f not in self._mappings]

    def is_complete(self) -> bool:
        return not self.missing_required()

    def freeze(self) -> Mapping[str, str]:
        """Return a read-only snapshot ordered by target field."""
        return MappingProxyType(
            {f: self._mappings[f] for f in TARGET_FIELD_IDS if f in self._mappings}
        )

    def __len__(self) -> int:
        return len(self._mappings)

    def __repr__(self) -> str:
        return f"ColumnMapping({dict(self.freeze())!r})"
