from passlib.context import CryptContext
from datetime import datetime, timedelta, timezone
from jose import jwt, JWTError
from ..config import settings
from ..domain.entities import Principal, ROLES

pwd = CryptContext(
    schemes=["bcrypt_sha256"],
    deprecated="auto",
    bcrypt_sha256__truncate_error=False,
)

class PasswordHasher:
    def hash(self, plain: str) -> str: return pwd.hash(plain)
    def verify(self, plain: str, hashed: str) -> bool: return pwd.verify(plain, hashed)
    def dummy_verify(self) -> None: pwd.dummy_verify()

def create_access_token(user_id: int, username: str, role: str = "student",
                        minutes: int | None = None) -> str:
    exp = datetime.now(timezone.utc) + timedelta(minutes=minutes or settings.ACCESS_TOKEN_MINUTES)
    payload = {"sub": str(user_id), "username": username, "role": role, "exp": exp}
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def decode_token(token: str) -> Principal:
    """Returns the session principal carried by the token or raises JWTError."""
    payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    sub = payload.get("sub")
    username = payload.get("username")
    role = payload.get("role")
    if not sub or not username or role not in ROLES:
        raise JWTError("Incomplete claims")
    try:
        user_id = int(sub)
    except ValueError:
        raise JWTError("Malformed subject")
    return Principal(user_id=user_id, username=username, role=role)
