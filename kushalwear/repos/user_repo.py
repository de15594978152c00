# kushalwear/repos/user_repo.py
from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session

from kushalwear.data.models.user import UserModel


class UserRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_user(self, user_id: str) -> UserModel | None:
        return self.db.get(UserModel, user_id)

    def get_by_email(self, email: str) -> UserModel | None:
        return self.db.execute(
            select(UserModel).where(UserModel.email == email.lower())
        ).scalar_one_or_none()

    def create_user(self, user: UserModel) -> UserModel:
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)
        return user

    def save(self, user: UserModel) -> UserModel:
        self.db.commit()
        self.db.refresh(user)
        return user

    def list_users(self, page: int, limit: int, search: str | None = None):
        filters = []
        if search:
            pattern = f"%{search}%"
            filters.append(or_(UserModel.name.ilike(pattern), UserModel.email.ilike(pattern)))

        total = self.db.execute(
            select(func.count()).select_from(UserModel).where(*filters)
        ).scalar_one()
        users = self.db.execute(
            select(UserModel)
            .where(*filters)
            .order_by(UserModel.created_at.desc())
            .offset((page - 1) * limit)
            .limit(limit)
        ).scalars().all()
        return users, total

    def rollback(self):
        self.db.rollback()
