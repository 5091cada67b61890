from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError
from ...domain.entities import Principal
from ...domain.errors import AuthenticationFailed, PermissionDenied
from ...infrastructure.security import decode_token

bearer = HTTPBearer(auto_error=False)

def get_principal(creds: HTTPAuthorizationCredentials | None = Depends(bearer)) -> Principal:
    if creds is None:
        raise AuthenticationFailed("Not authenticated.")
    try:
        return decode_token(creds.credentials)
    except JWTError:
        raise AuthenticationFailed("Invalid token.")

def require_admin(principal: Principal = Depends(get_principal)) -> Principal:
    if not principal.is_admin:
        raise PermissionDenied("Admin required.")
    return principal

def ensure_can_act_for(principal: Principal, student_id: int) -> None:
    if not principal.can_act_for(student_id):
        raise PermissionDenied("Students may only manage their own courses.")
