from ..core.config import settings
from ..db.client import get_users_table
from ..db.repositories.users import UserRepository


def get_user_repository() -> UserRepository:
    return UserRepository(get_users_table(), page_size=settings.SCAN_PAGE_SIZE)
