import unittest

from finance_tracker.database.engine import create_db_engine, init_database
from finance_tracker.database.schema import categories
from finance_tracker.repositories.base import BaseRepository
from finance_tracker.repositories.filters import PredicateBuilder
from tests.support import make_settings


class TestBaseRepository(unittest.TestCase):
    def setUp(self):
        self.engine = create_db_engine(make_settings())
        self.addCleanup(self.engine.dispose)
        init_database(self.engine)
        self.conn = self.engine.connect()
        self.addCleanup(self.conn.close)
        self.repo = BaseRepository(self.conn, categories, dict)

    def test_usable_on_any_table(self):
        food = self.repo.insert_one({"name": "Food", "type": "expense"})
        self.repo.insert_one({"name": "Salary", "type": "income"})

        self.assertEqual(self.repo.find_by_id(food["id"])["name"], "Food")
        self.assertEqual(self.repo.count(), 2)
        self.assertEqual(
            self.repo.count(PredicateBuilder().equals(categories.c.type, "income")), 1
        )

        renamed = self.repo.update(food["id"], {"name": "Groceries"})
        self.assertEqual(renamed["name"], "Groceries")
        self.assertTrue(self.repo.delete(food["id"]))
        self.assertIsNone(self.repo.find_by_id(food["id"]))
        self.assertFalse(self.repo.delete(food["id"]))


if __name__ == "__main__":
    unittest.main()
