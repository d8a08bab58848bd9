from sqlalchemy.engine import Connection

from finance_tracker.domain.entities import CategoryType
from finance_tracker.dtos import CategoryListResponse, CategoryResponse
from finance_tracker.repositories.category import CategoryRepository

DEFAULT_CATEGORIES = [
    ("Salary", CategoryType.INCOME),
    ("Investment", CategoryType.INCOME),
    ("Food", CategoryType.EXPENSE),
    ("Transport", CategoryType.EXPENSE),
    ("Shopping", CategoryType.EXPENSE),
    ("Bills", CategoryType.EXPENSE),
    ("Other", CategoryType.BOTH),
]


class CategoryService:
    def __init__(self, conn: Connection):
        self.conn = conn
        self.category_repo = CategoryRepository(conn)

    def list_categories(self) -> CategoryListResponse:
        return CategoryListResponse(
            categories=[
                CategoryResponse.model_validate(row)
                for row in self.category_repo.list_all()
            ]
        )

    def seed_defaults(self) -> int:
        """Insert the default categories that are missing; returns how many were added."""
        return sum(
            1
            for name, category_type in DEFAULT_CATEGORIES
            if self.category_repo.ensure(name, category_type)
        )
