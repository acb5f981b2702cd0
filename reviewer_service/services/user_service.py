# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Service: user lookups and activity toggling."""

from reviewer_service.core.logging import get_logger
from reviewer_service.models.domain import User
from reviewer_service.models.errors import DomainError, ErrorCode
from reviewer_service.repositories.user_repository import UserRepository

logger = get_logger(__name__)


class UserService:
    def __init__(self, user_repo: UserRepository) -> None:
        self._users = user_repo

    def set_is_active(self, user_id: str, is_active: bool) -> User:
        if not self._users.exists(user_id):
            raise DomainError(ErrorCode.NOT_FOUND, "user not found")
        user = self._users.set_is_active(user_id, is_active)
        if user is None:
            raise DomainError(ErrorCode.NOT_FOUND, "user not found")
        logger.info("User activity changed id=%s is_active=%s", user_id, is_active)
        return user

    def get_user(self, user_id: str) -> User:
        user = self._users.get_by_id(user_id)
        if user is None:
            raise DomainError(ErrorCode.NOT_FOUND, "user not found")
        return user
