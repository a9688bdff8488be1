# storefront/services/auth_service.py
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from storefront.data.models.user import UserModel
from storefront.domain.errors import AuthenticationError, ConflictError
from storefront.domain.schemas import (
    AuthOut,
    LoginIn,
    PasswordChangeIn,
    ProfileUpdateIn,
    RegisterIn,
    UserOut,
)
from storefront.repos.user_repo import UserRepo
from storefront.services.policy import CUSTOMER
from storefront.utils.logging import get_logger
from storefront.utils.security import (
    JWTError,
    create_token,
    decode_token,
    hash_password,
    verify_password,
)

logger = get_logger(__name__)

# ten sam komunikat dla nieznanego maila i zlego hasla
INVALID_CREDENTIALS = "Incorrect email or password"


class AuthService:
    """Rejestracja, logowanie, tokeny i profil zalogowanego uzytkownika."""

    def __init__(self, db: Session):
        self.repo = UserRepo(db)

    def register(self, payload: RegisterIn) -> AuthOut:
        email = str(payload.email).lower()

        if self.repo.get_by_email(email):
            raise ConflictError("User already exists")

        try:
            user = self.repo.create_user(
                UserModel(
                    name=payload.name,
                    email=email,
                    password_hash=hash_password(payload.password),
                    role=CUSTOMER,
                )
            )
        except IntegrityError:
            # rownolegla rejestracja z tym samym mailem
            self.repo.rollback()
            raise ConflictError("User already exists")

        logger.info(f"Registered user {user.id} ({user.email})")

        return AuthOut(user=UserOut.model_validate(user), token=create_token(str(user.id)))

    def login(self, payload: LoginIn) -> AuthOut:
        user = self.repo.get_by_email(payload.email)

        if not user or not verify_password(payload.password, user.password_hash):
            logger.warning(f"Failed login attempt for {payload.email}")
            raise AuthenticationError(INVALID_CREDENTIALS)

        return AuthOut(user=UserOut.model_validate(user), token=create_token(str(user.id)))

    def resolve_token(self, token: str | None) -> UserModel:
        """Token -> uzytkownik, 401 dla braku, zlego lub wygaslego tokenu."""
        if not token:
            raise AuthenticationError("You are not logged in. Please log in to get access")

        try:
            payload = decode_token(token)
        except JWTError:
            raise AuthenticationError("Invalid or expired token")

        sub = payload.get("sub")
        if sub is None or not str(sub).isdigit():
            raise AuthenticationError("Invalid or expired token")

        user = self.repo.get_user(int(sub))
        if not user:
            raise AuthenticationError("The user belonging to this token no longer exists")

        return user

    def me(self, user: UserModel) -> UserOut:
        return UserOut.model_validate(user)

    def update_profile(self, user: UserModel, payload: ProfileUpdateIn) -> UserOut:
        changes = payload.model_dump(exclude_unset=True)
        # imienia nie da sie wyczyscic, pozostale pola kontaktowe tak
        if changes.get("name", "") is None:
            del changes["name"]

        for field, value in changes.items():
            setattr(user, field, value)

        saved = self.repo.save(user)
        logger.info(f"User {user.id} updated profile fields {sorted(changes)}")
        return UserOut.model_validate(saved)

    def change_password(self, user: UserModel, payload: PasswordChangeIn) -> AuthOut:
        if not verify_password(payload.current_password, user.password_hash):
            raise AuthenticationError("Your current password is wrong")

        user.password_hash = hash_password(payload.new_password)
        saved = self.repo.save(user)

        logger.info(f"User {user.id} changed password")

        return AuthOut(user=UserOut.model_validate(saved), token=create_token(str(saved.id)))
