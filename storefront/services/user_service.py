import math

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from storefront.data.models.user import UserModel
from storefront.domain.errors import ConflictError, NotFoundError, ValidationError
from storefront.domain.schemas import AdminCreateIn, Pagination, UserOut
from storefront.repos.user_repo import UserRepo
from storefront.services.policy import ADMIN, ROLES
from storefront.utils.logging import get_logger
from storefront.utils.security import hash_password

logger = get_logger(__name__)


class UserService:
    """Administracja kontami: lista, role, tworzenie adminow, usuwanie."""

    def __init__(self, db: Session):
        self.repo = UserRepo(db)

    def list_users(
        self,
        search: str | None = None,
        role: str | None = None,
        page: int = 1,
        limit: int = 50,
    ) -> tuple[list[UserOut], Pagination]:
        users, total = self.repo.search_users(
            search=search.strip() if search else None,
            role=role or None,
            offset=(page - 1) * limit,
            limit=limit,
        )
        pagination = Pagination(
            page=page,
            limit=limit,
            total=total,
            total_pages=math.ceil(total / limit),
        )
        return [UserOut.model_validate(u) for u in users], pagination

    def get_user(self, user_id: int) -> UserOut:
        user = self.repo.get_user(user_id)
        if not user:
            raise NotFoundError("User not found")
        return UserOut.model_validate(user)

    def update_role(self, acting: UserModel, user_id: int, role: str) -> UserOut:
        if role not in ROLES:
            raise ValidationError("Invalid role. Must be either customer or admin")

        if user_id == acting.id:
            raise ValidationError("You cannot change your own role")

        user = self.repo.get_user(user_id)
        if not user:
            raise NotFoundError("User not found")

        user.role = role
        saved = self.repo.save(user)

        logger.info(f"Admin {acting.id} set role of user {user_id} to {role}")
        return UserOut.model_validate(saved)

    def create_admin(self, payload: AdminCreateIn) -> UserOut:
        email = str(payload.email).lower()

        if self.repo.get_by_email(email):
            raise ConflictError("User with this email already exists")

        try:
            user = self.repo.create_user(
                UserModel(
                    name=payload.name,
                    email=email,
                    password_hash=hash_password(payload.password),
                    role=ADMIN,
                )
            )
        except IntegrityError:
            self.repo.rollback()
            raise ConflictError("User with this email already exists")

        logger.info(f"Created admin user {user.id} ({user.email})")
        return UserOut.model_validate(user)

    def delete_user(self, acting: UserModel, user_id: int) -> None:
        if user_id == acting.id:
            raise ValidationError("You cannot delete your own account")

        user = self.repo.get_user(user_id)
        if not user:
            raise NotFoundError("User not found")

        self.repo.delete_user(user)
        logger.info(f"Admin {acting.id} deleted user {user_id}")
