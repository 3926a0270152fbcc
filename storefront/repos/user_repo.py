from sqlalchemy import func, select
from sqlalchemy.orm import Session

from storefront.data.models.user import UserModel


class UserRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_user(self, user_id: int) -> UserModel | None:
        return self.db.get(UserModel, user_id)

    def create_user(self, user: UserModel) -> UserModel:
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)
        return user

    def count_customers(self) -> int:
        return self.db.execute(
            select(func.count(UserModel.id)).where(UserModel.role == "customer")
        ).scalar_one()
