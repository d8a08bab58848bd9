from typing import List

from pydantic import BaseModel

from finance_tracker.domain.entities import CategoryType


class CategoryResponse(BaseModel):
    id: int
    name: str
    type: CategoryType


class CategoryListResponse(BaseModel):
    categories: List[CategoryResponse]
