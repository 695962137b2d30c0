import structlog
from sqlalchemy.orm import Session

from roomierules.core.exceptions import UnauthorizedException, ValidationException
from roomierules.core.security import create_access_token, hash_password, verify_password
from roomierules.models.user import User
from roomierules.repositories.user_repository import UserRepository
from roomierules.schemas.auth_schemas import RegisterRequest, LoginRequest

logger = structlog.get_logger(__name__)


class AuthService:
    """Registration and credential checks"""

    def __init__(self, db: Session):
        self.db = db
        self.user_repo = UserRepository(db)

    def register(self, data: RegisterRequest) -> User:
        """
        Create an account with a hashed password.

        Raises:
            ValidationException: If the email is already registered
        """
        email = data.email.lower()
        if self.user_repo.get_by_email(email):
            raise ValidationException("An account with this email already exists")

        user = User(
            email=email,
            password_hash=hash_password(data.password),
            name=data.name.strip(),
            phone=data.phone,
            role=data.role,
        )
        user = self.user_repo.create(user)
        logger.info("user_registered", user_id=user.id, role=user.role.value)
        return user

    def login(self, data: LoginRequest) -> tuple[User, str]:
        """
        Check credentials and issue an access token.

        Raises:
            UnauthorizedException: Unknown email or wrong password
        """
        user = self.user_repo.get_by_email(data.email)
        if not user or not verify_password(data.password, user.password_hash):
            raise UnauthorizedException("Invalid email or password")
        return user, create_access_token(user.id)
