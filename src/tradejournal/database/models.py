"""SQLAlchemy models for tradejournal database."""

from datetime import datetime, UTC
from decimal import Decimal

from sqlalchemy import (
    JSON,
    BigInteger,
    Column,
    Integer,
    String,
    ForeignKey,
    TypeDecorator,
    DateTime,
    UniqueConstraint,
    create_engine,
)
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session

Base = declarative_base()


class DecimalText(TypeDecorator):
    """Decimal stored as its exact text form.

    SQLite has no decimal type and would round NUMERIC values through float.
    """

    impl = String
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        return str(Decimal(str(value)))

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        return Decimal(value)


class Account(Base):
    """Trading account model. Accounts are owned by a user id."""

    __tablename__ = "accounts"

    id = Column(String(36), primary_key=True)
    user_id = Column(String, nullable=False, index=True)
    position = Column(Integer, default=0, nullable=False)
    broker = Column(String, nullable=False)
    account_type = Column(String, default="real", nullable=False)
    balance = Column(DecimalText, default=0, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Relationships
    trades = relationship(
        "Trade",
        back_populates="account",
        cascade="all, delete-orphan",
        order_by="Trade.position",
    )


class Trade(Base):
    """Trade record model."""

    __tablename__ = "trades"

    id = Column(String(36), primary_key=True)
    account_id = Column(String(36), ForeignKey("accounts.id"), nullable=False)
    position = Column(Integer, default=0, nullable=False)
    symbol = Column(String, nullable=False)
    date_seconds = Column(BigInteger, nullable=False)
    date_nanoseconds = Column(Integer, default=0, nullable=False)
    exit_time = Column(String, default="00:00:00", nullable=False)
    trade_type = Column(String, nullable=False)
    market_type = Column(String, nullable=False)
    entry = Column(DecimalText, nullable=False)
    exit = Column(DecimalText, nullable=False)
    size = Column(DecimalText, nullable=False)
    pnl = Column(DecimalText, nullable=False)
    commission = Column(DecimalText, default=0, nullable=False)
    tp = Column(DecimalText, nullable=True)
    sl = Column(DecimalText, nullable=True)
    tick_value = Column(DecimalText, nullable=True)
    pip_value = Column(DecimalText, nullable=True)
    notes = Column(String, nullable=True)
    followed_rules = Column(JSON, default=list, nullable=False)
    created_at = Column(BigInteger, nullable=False)

    # Relationships
    account = relationship("Account", back_populates="trades")


class ImportFormat(Base):
    """Saved CSV import format model."""

    __tablename__ = "import_formats"

    id = Column(Integer, primary_key=True)
    name = Column(String, unique=True, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Relationships
    column_mappings = relationship(
        "ImportFormatMapping", back_populates="format", cascade="all, delete-orphan"
    )


class ImportFormatMapping(Base):
    """Column mapping of a saved import format."""

    __tablename__ = "import_format_mappings"

    id = Column(Integer, primary_key=True)
    format_id = Column(Integer, ForeignKey("import_formats.id"), nullable=False)
    csv_column_name = Column(String, nullable=False)
    target_field = Column(String, nullable=False)

    # One column per target field
    __table_args__ = (UniqueConstraint("format_id", "target_field", name="uq_format_target_field"),)

    # Relationships
    format = relationship("ImportFormat", back_populates="column_mappings")


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
