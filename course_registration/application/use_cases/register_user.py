import secrets

import structlog

from ..dto import NewUserRecord, SignupInput
from ...domain.entities import ADMIN, ROLES, STUDENT, User
from ...domain.errors import Conflict, InternalError, ValidationFailed

logger = structlog.get_logger()

ROLE_PREFIXES = {STUDENT: "SD", ADMIN: "AD"}


class DuplicateUserCode(Exception):
    """Raised by a repository when the generated human-readable ID is already taken."""


class IUserRepository:
    def get_by_username(self, username: str) -> User | None: ...
    def get_by_email(self, email: str) -> User | None: ...
    def get_with_password_hash(self, username: str) -> tuple[User, str] | None: ...
    def create(self, record: NewUserRecord) -> User: ...
    def list_by_role(self, role: str) -> list[User]: ...


class IPasswordHasher:
    def hash(self, plain: str) -> str: ...


def generate_user_code(role: str, digits: int = 4) -> str:
    return ROLE_PREFIXES[role] + str(secrets.randbelow(10 ** digits))


class RegisterUser:
    def __init__(
        self,
        repo: IUserRepository,
        hasher: IPasswordHasher,
        code_generator=generate_user_code,
        max_attempts: int = 5,
        suffix_digits: int = 4,
    ):
        self.repo = repo
        self.hasher = hasher
        self.code_generator = code_generator
        self.max_attempts = max_attempts
        self.suffix_digits = suffix_digits

    def execute(self, data: SignupInput) -> User:
        if data.role not in ROLES:
            raise ValidationFailed("Role must be 'student' or 'admin'.")
        if self.repo.get_by_username(data.username):
            raise Conflict("Username already taken.")
        if self.repo.get_by_email(data.email):
            raise Conflict("Email already registered.")

        pwd_hash = self.hasher.hash(data.password)
        for attempt in range(1, self.max_attempts + 1):
            code = self.code_generator(data.role, self.suffix_digits)
            record = NewUserRecord(
                first_name=data.first_name,
                last_name=data.last_name,
                email=data.email,
                phone=data.phone,
                birthday=data.birthday,
                username=data.username,
                password_hash=pwd_hash,
                role=data.role,
                user_code=code,
                program=data.program if data.role == STUDENT else None,
            )
            try:
                user = self.repo.create(record)
            except DuplicateUserCode:
                logger.warning("user_code_collision", user_code=code, attempt=attempt)
                continue
            logger.info("user_signed_up", user_id=user.id, username=user.username, role=user.role)
            return user

        logger.error("user_code_exhausted", username=data.username, attempts=self.max_attempts)
        raise InternalError("Could not allocate a unique user ID.")
