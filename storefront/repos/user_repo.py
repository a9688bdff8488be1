from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session

from storefront.data.models.user import UserModel


class UserRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_user(self, user_id: int) -> UserModel | None:
        return self.db.get(UserModel, user_id)

    def get_by_email(self, email: str) -> UserModel | None:
        return self.db.execute(
            select(UserModel).where(func.lower(UserModel.email) == email.lower())
        ).scalar_one_or_none()

    def create_user(self, user: UserModel) -> UserModel:
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)
        return user

    def save(self, user: UserModel) -> UserModel:
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)
        return user

    def delete_user(self, user: UserModel) -> None:
        self.db.delete(user)
        self.db.commit()

    def rollback(self):
        self.db.rollback()

    def search_users(
        self,
        search: str | None,
        role: str | None,
        offset: int,
        limit: int,
    ) -> tuple[list[UserModel], int]:
        stmt = select(UserModel)

        if search:
            term = search.lower()
            stmt = stmt.where(
                or_(
                    func.lower(UserModel.name).contains(term, autoescape=True),
                    func.lower(UserModel.email).contains(term, autoescape=True),
                )
            )
        if role:
            stmt = stmt.where(UserModel.role == role)

        total = self.db.execute(
            select(func.count()).select_from(stmt.subquery())
        ).scalar_one()

        users = self.db.execute(
            stmt.order_by(UserModel.created_at.desc(), UserModel.id.desc())
            .offset(offset)
            .limit(limit)
        ).scalars().all()

        return list(users), total
