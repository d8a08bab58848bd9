import unittest
from datetime import date

from sqlalchemy import select
from sqlalchemy.dialects import postgresql, sqlite

from finance_tracker.database.schema import transactions, year_month
from finance_tracker.domain.entities import Identity, Role
from finance_tracker.repositories.filters import PredicateBuilder

c = transactions.c


def compile_sqlite(stmt):
    return stmt.compile(dialect=sqlite.dialect())


class TestPredicateBuilder(unittest.TestCase):
    def test_missing_values_are_skipped(self):
        builder = (
            PredicateBuilder()
            .equals(c.category, None)
            .equals(c.category, "   ")
            .contains_ci(c.description, "")
            .on_or_after(c.date, None)
            .on_or_before(c.date, None)
        )
        self.assertEqual(len(builder), 0)

        stmt = select(c.id)
        self.assertIs(builder.where(stmt), stmt)

    def test_present_values_become_bound_parameters(self):
        hostile = "Food'; DROP TABLE users; --"
        builder = (
            PredicateBuilder()
            .equals(c.category, hostile)
            .on_or_after(c.date, date(2024, 1, 1))
            .on_or_before(c.date, date(2024, 1, 31))
        )
        self.assertEqual(len(builder), 3)

        compiled = compile_sqlite(builder.where(select(c.id)))
        sql = str(compiled)
        self.assertNotIn("DROP TABLE", sql)
        self.assertIn("WHERE", sql)
        self.assertIn(hostile, compiled.params.values())
        self.assertIn(date(2024, 1, 1), compiled.params.values())
        self.assertIn(date(2024, 1, 31), compiled.params.values())

    def test_contains_ci_escapes_wildcards(self):
        builder = PredicateBuilder().contains_ci(c.description, "50%_off")
        compiled = compile_sqlite(builder.where(select(c.id)))

        sql = str(compiled).lower()
        self.assertIn("like", sql)
        self.assertIn("lower(", sql)
        self.assertIn("escape", sql)
        self.assertIn("50/%/_off", compiled.params.values())

    def test_owned_by_scopes_non_admin_roles(self):
        for role in (Role.USER, Role.READ_ONLY):
            builder = PredicateBuilder().owned_by(c.user_id, Identity(user_id=7, role=role))
            self.assertEqual(len(builder), 1, role)
            compiled = compile_sqlite(builder.where(select(c.id)))
            self.assertIn(7, compiled.params.values())

    def test_owned_by_leaves_admin_unscoped(self):
        builder = PredicateBuilder().owned_by(c.user_id, Identity(user_id=1, role=Role.ADMIN))
        self.assertEqual(len(builder), 0)

    def test_clauses_returns_a_copy(self):
        builder = PredicateBuilder().equals(c.category, "Food")
        builder.clauses.clear()
        self.assertEqual(len(builder), 1)


class TestYearMonth(unittest.TestCase):
    def test_renders_per_dialect(self):
        stmt = select(year_month(c.date))
        self.assertIn(
            "strftime('%Y-%m', transactions.date)",
            str(stmt.compile(dialect=sqlite.dialect())),
        )
        self.assertIn(
            "to_char(transactions.date, 'YYYY-MM')",
            str(stmt.compile(dialect=postgresql.dialect())),
        )


if __name__ == "__main__":
    unittest.main()
