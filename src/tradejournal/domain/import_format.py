"""Import format domain service."""

from typing import Optional

from tradejournal.database.base import Database
from tradejournal.domain.column_mapping import (
    REQUIRED_FIELD_IDS,
    ColumnMapping,
    check_target_field,
)
from tradejournal.domain.entities import (
    ImportFormat as ImportFormatEntity,
    ImportFormatMapping as ImportFormatMappingEntity,
)
from tradejournal.domain.errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
    import_format_not_found,
)


class ImportFormatService:
    """Service for managing saved CSV import formats."""

    def __init__(self, db: Database):
        """Initialize import format service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_format(self, name: str) -> int:
        """Create a new import format.

        Args:
            name: Format name

        Returns:
            Format ID

        Raises:
            ValidationError: If name is empty
            ConflictError: If format name already exists
        """
        if not name or not name.strip():
            raise ValidationError("Import format name is required")

        existing = self.db.get_import_format_by_name(name)
        if existing is not None:
            raise ConflictError(f"Import format with name '{name}' already exists")

        return self.db.create_import_format(name=name)

    def get_format(self, format_id: int) -> Optional[ImportFormatEntity]:
        """Get import format by ID."""
        return self.db.get_import_format(format_id)

    def get_format_by_name(self, name: str) -> Optional[ImportFormatEntity]:
        """Get import format by name."""
        return self.db.get_import_format_by_name(name)

    def list_formats(self) -> list[ImportFormatEntity]:
        """List import formats."""
        return self.db.list_import_formats()

    def set_mapping(self, format_id: int, csv_column_name: str, target_field: str) -> int:
        """Map a CSV column to a target field of a format.

        A target field holds at most one column; mapping it again replaces
        the previous column.

        Args:
            format_id: Format ID
            csv_column_name: Column name in CSV file
            target_field: Target field id (symbol, date, entry, etc.)

        Returns:
            Mapping ID

        Raises:
            NotFoundError: If format doesn't exist
            ValidationError: If target field is invalid or column name is empty
        """
        fmt = self.db.get_import_format(format_id)
        if fmt is None:
            raise NotFoundError(f"Import format {format_id} not found")

        check_target_field(target_field)
        if not csv_column_name or not csv_column_name.strip():
            raise ValidationError("CSV column name is required")

        return self.db.set_format_mapping(
            format_id=format_id,
            csv_column_name=csv_column_name.strip(),
            target_field=target_field,
        )

    def get_mappings(self, format_id: int) -> list[ImportFormatMappingEntity]:
        """Get all column mappings for a format."""
        return self.db.get_format_mappings(format_id)

    def validate_format(self, format_id: int) -> tuple[bool, list[str]]:
        """Validate that a format maps every required field.

        Returns:
            Tuple of (is_valid, list of missing required fields)
        """
        mapped_fields = {m.target_field for m in self.get_mappings(format_id)}
        missing = [f for f in REQUIRED_FIELD_IDS if f not in mapped_fields]
        return (len(missing) == 0, missing)

    def column_mapping(self, name: str, headers: Optional[tuple[str, ...]] = None) -> ColumnMapping:
        """Build a ColumnMapping from a saved format.

        Args:
            name: Format name
            headers: Optional CSV headers the mapped columns must exist in

        Raises:
            NotFoundError: If the format doesn't exist
            ValidationError: If a mapped column is missing from headers
        """
        fmt = self.get_format_by_name(name)
        if fmt is None:
            raise NotFoundError(import_format_not_found(name))

        mappings = {m.target_field: m.csv_column_name for m in self.get_mappings(fmt.id)}
        if headers is not None:
            missing_columns = sorted(set(mappings.values()) - set(headers))
            if missing_columns:
                raise ValidationError(
                    f"CSV file missing columns required by format '{name}': "
                    f"{', '.join(missing_columns)}"
                )
        return ColumnMapping(mappings, headers=headers)

    def delete_format(self, format_id: int) -> None:
        """Delete an import format.

        Raises:
            NotFoundError: If format doesn't exist
        """
        fmt = self.db.get_import_format(format_id)
        if fmt is None:
            raise NotFoundError(f"Import format {format_id} not found")

        self.db.delete_import_format(format_id)
