import unittest
from datetime import date
from decimal import Decimal

from pydantic import ValidationError

from finance_tracker.domain.entities import TransactionType
from finance_tracker.dtos import TransactionCreateRequest, TransactionUpdateRequest


def valid_payload(**overrides):
    payload = {
        "amount": "19.999",
        "type": "expense",
        "category": "  Food ",
        "date": "2024-03-15T10:30:00Z",
        "description": "  lunch  ",
    }
    payload.update(overrides)
    return payload


class TestTransactionCreateRequest(unittest.TestCase):
    def test_normalises_fields(self):
        request = TransactionCreateRequest(**valid_payload())

        self.assertEqual(request.amount, Decimal("20.00"))
        self.assertIs(request.type, TransactionType.EXPENSE)
        self.assertEqual(request.category, "Food")
        self.assertEqual(request.date, date(2024, 3, 15))
        self.assertEqual(request.description, "lunch")
        self.assertEqual(request.to_values()["type"], "expense")

    def test_rejects_non_positive_amounts(self):
        for amount in (0, -5, "0.001", "abc", None, True, "NaN", "Infinity"):
            with self.subTest(amount=amount):
                with self.assertRaises(ValidationError):
                    TransactionCreateRequest(**valid_payload(amount=amount))

    def test_rejects_oversized_amount(self):
        with self.assertRaises(ValidationError):
            TransactionCreateRequest(**valid_payload(amount="10000000000"))

    def test_rejects_bad_type_category_and_date(self):
        cases = {
            "type": "gift",
            "category": "x" * 51,
            "date": "15/03/2024",
        }
        for field, value in cases.items():
            with self.subTest(field=field):
                with self.assertRaises(ValidationError) as ctx:
                    TransactionCreateRequest(**valid_payload(**{field: value}))
                self.assertEqual(ctx.exception.errors()[0]["loc"], (field,))

    def test_blank_category_rejected(self):
        with self.assertRaises(ValidationError):
            TransactionCreateRequest(**valid_payload(category="   "))

    def test_description_limits(self):
        self.assertIsNone(TransactionCreateRequest(**valid_payload(description="")).description)
        self.assertEqual(
            len(TransactionCreateRequest(**valid_payload(description="d" * 500)).description),
            500,
        )
        with self.assertRaises(ValidationError):
            TransactionCreateRequest(**valid_payload(description="d" * 501))


class TestTransactionUpdateRequest(unittest.TestCase):
    def test_only_sent_fields_are_written(self):
        request = TransactionUpdateRequest(amount=12)
        self.assertEqual(request.to_values(), {"amount": Decimal("12.00")})

    def test_explicit_null_description_clears_it(self):
        request = TransactionUpdateRequest(description=None)
        self.assertEqual(request.to_values(), {"description": None})

    def test_explicit_null_required_field_rejected(self):
        for field in ("amount", "type", "category", "date"):
            with self.subTest(field=field):
                with self.assertRaises(ValidationError):
                    TransactionUpdateRequest(**{field: None})

    def test_empty_body_is_a_no_op(self):
        self.assertEqual(TransactionUpdateRequest().to_values(), {})


if __name__ == "__main__":
    unittest.main()
