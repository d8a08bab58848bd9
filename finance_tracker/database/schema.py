"""Relational schema (SQLAlchemy Core tables) for users, transactions and categories."""

from sqlalchemy import (
    CheckConstraint,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    MetaData,
    Numeric,
    String,
    Table,
    func,
)
from sqlalchemy.ext.compiler import compiles
from sqlalchemy.sql.functions import FunctionElement
from sqlalchemy.types import String as StringType

metadata = MetaData()

users = Table(
    "users",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("email", String(255), nullable=False, unique=True),
    Column("username", String(30), nullable=False),
    Column("password_hash", String(255), nullable=False),
    Column("role", String(20), nullable=False, server_default="user"),
    Column("created_at", DateTime(timezone=True), nullable=False, server_default=func.now()),
    CheckConstraint("role IN ('admin', 'user', 'read-only')", name="ck_users_role"),
)

transactions = Table(
    "transactions",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column(
        "user_id",
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("amount", Numeric(12, 2), nullable=False),
    Column("type", String(10), nullable=False),
    Column("category", String(50), nullable=False),
    Column("date", Date, nullable=False),
    Column("description", String(500), nullable=True),
    Column("created_at", DateTime(timezone=True), nullable=False, server_default=func.now()),
    Column("updated_at", DateTime(timezone=True), nullable=True),
    CheckConstraint("amount > 0", name="ck_transactions_amount_positive"),
    CheckConstraint("type IN ('income', 'expense')", name="ck_transactions_type"),
    Index("ix_transactions_user_date", "user_id", "date"),
)

categories = Table(
    "categories",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("name", String(50), nullable=False, unique=True),
    Column("type", String(10), nullable=False),
    CheckConstraint("type IN ('income', 'expense', 'both')", name="ck_categories_type"),
)


class year_month(FunctionElement):
    """`YYYY-MM` key of a date column, rendered per dialect."""

    type = StringType()
    name = "year_month"
    inherit_cache = True


@compiles(year_month)
def _compile_year_month_default(element, compiler, **kw):
    return "to_char(%s, 'YYYY-MM')" % compiler.process(element.clauses, **kw)


@compiles(year_month, "sqlite")
def _compile_year_month_sqlite(element, compiler, **kw):
    return "strftime('%%Y-%%m', %s)" % compiler.process(element.clauses, **kw)
