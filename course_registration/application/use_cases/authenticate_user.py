import structlog

from .register_user import IUserRepository
from ...domain.entities import User
from ...domain.errors import AuthenticationFailed

logger = structlog.get_logger()


class IPasswordVerifier:
    def verify(self, plain: str, hashed: str) -> bool: ...
    def dummy_verify(self) -> None: ...


class AuthenticateUser:
    """Checks a username/password pair.

    Unknown usernames and wrong passwords fail the same way, and an unknown
    username still pays for one hash verification.
    """

    def __init__(self, repo: IUserRepository, hasher: IPasswordVerifier):
        self.repo = repo
        self.hasher = hasher

    def execute(self, username: str, password: str) -> User:
        found = self.repo.get_with_password_hash(username)
        if found is None:
            self.hasher.dummy_verify()
            logger.info("login_failed", username=username)
            raise AuthenticationFailed()
        user, password_hash = found
        if not self.hasher.verify(password, password_hash):
            logger.info("login_failed", username=username)
            raise AuthenticationFailed()
        return user
