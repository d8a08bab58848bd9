from fastapi import APIRouter, Depends
from sqlalchemy.engine import Connection

from finance_tracker.api.deps import ALL_ROLES, get_connection, require_roles
from finance_tracker.domain.entities import Identity
from finance_tracker.dtos import CategoryListResponse
from finance_tracker.services.category_service import CategoryService

router = APIRouter(prefix="/categories", tags=["Categories"])


@router.get("", response_model=CategoryListResponse)
def list_categories(
    _identity: Identity = Depends(require_roles(*ALL_ROLES)),
    conn: Connection = Depends(get_connection, scope="function"),
):
    """Seeded reference categories, ordered by name."""
    service = CategoryService(conn)
    return service.list_categories()
