from sqlalchemy.orm import Session

from storefront.data.models.user import UserModel
from storefront.domain.exceptions import NotFoundError
from storefront.domain.schemas import UserCreate, UserRead, UserRole
from storefront.repos.user_repo import UserRepo


class UserService:
    def __init__(self, db: Session):
        self.repo = UserRepo(db)

    def create_user(self, payload: UserCreate) -> UserRead:
        existing = self.repo.get_user(payload.id)
        if existing:
            return UserRead.model_validate(existing)

        user = UserModel(id=payload.id, name=payload.name, email=payload.email, role=payload.role.value)
        created = self.repo.create_user(user)
        return UserRead.model_validate(created)

    def get_user(self, user_id: int) -> UserRead:
        user = self.repo.get_user(user_id)
        if not user:
            raise NotFoundError("User not found")
        return UserRead.model_validate(user)

    def require_admin(self, user_id: int) -> UserRead:
        user = self.repo.get_user(user_id)
        if not user or user.role != UserRole.ADMIN.value:
            raise PermissionError("Admin access required")
        return UserRead.model_validate(user)
