"""Tests for ImportFormatService."""

import pytest

from tradejournal.domain.errors import ConflictError, NotFoundError, ValidationError


class TestImportFormatService:
    """Tests for ImportFormatService."""

    def test_create_format(self, import_format_service):
        """Test creating an import format."""
        format_id = import_format_service.create_format(name="Tradovate")

        fmt = import_format_service.get_format(format_id)
        assert fmt.name == "Tradovate"
        assert [f.name for f in import_format_service.list_formats()] == ["Tradovate"]

    def test_create_duplicate_format(self, import_format_service, sample_import_format):
        """Test that format names are unique."""
        with pytest.raises(ConflictError):
            import_format_service.create_format(name="Broker Export")

    def test_create_requires_name(self, import_format_service):
        with pytest.raises(ValidationError):
            import_format_service.create_format(name=" ")

    def test_set_mapping_invalid_field(self, import_format_service, sample_import_format):
        """Test that unknown target fields are rejected."""
        with pytest.raises(ValidationError) as excinfo:
            import_format_service.set_mapping(sample_import_format.id, "Price", "price")

        assert "Invalid target field" in str(excinfo.value)

    def test_set_mapping_requires_column(self, import_format_service, sample_import_format):
        with pytest.raises(ValidationError):
            import_format_service.set_mapping(sample_import_format.id, "", "notes")

    def test_set_mapping_unknown_format(self, import_format_service):
        with pytest.raises(NotFoundError):
            import_format_service.set_mapping(999, "Instrument", "symbol")

    def test_validate_format(self, import_format_service, sample_import_format):
        """Test that a fully mapped format is valid."""
        assert import_format_service.validate_format(sample_import_format.id) == (True, [])

    def test_validate_incomplete_format(self, import_format_service):
        """Test that missing required fields are reported in field order."""
        format_id = import_format_service.create_format(name="Partial")
        import_format_service.set_mapping(format_id, "Ticker", "symbol")
        import_format_service.set_mapping(format_id, "Qty", "size")

        is_valid, missing = import_format_service.validate_format(format_id)

        assert not is_valid
        assert missing == ["date", "type", "entry", "exit"]

    def test_column_mapping(self, import_format_service, sample_import_format):
        """Test building a ColumnMapping from a saved format."""
        headers = ("Instrument", "Trade Date", "Side", "Entry Price", "Exit Price", "Qty", "Fees")

        mapping = import_format_service.column_mapping("Broker Export", headers)

        assert mapping.get("symbol") == "Instrument"
        assert mapping.get("commission") == "Fees"
        assert mapping.is_complete()

    def test_column_mapping_missing_columns(self, import_format_service, sample_import_format):
        """Test that CSV headers must contain every mapped column."""
        with pytest.raises(ValidationError) as excinfo:
            import_format_service.column_mapping("Broker Export", ("Instrument", "Qty"))

        assert "Entry Price" in str(excinfo.value)

    def test_column_mapping_unknown_format(self, import_format_service):
        with pytest.raises(NotFoundError):
            import_format_service.column_mapping("Nope")

    def test_delete_format(self, import_format_service, sample_import_format):
        import_format_service.delete_format(sample_import_format.id)

        assert import_format_service.get_format_by_name("Broker Export") is None

    def test_delete_unknown_format(self, import_format_service):
        with pytest.raises(NotFoundError):
            import_format_service.delete_format(999)
