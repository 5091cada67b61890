from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

from ....application.dto import SignupInput
from ....application.use_cases.authenticate_user import AuthenticateUser
from ....application.use_cases.register_user import RegisterUser
from ....config import settings
from ....domain.entities import STUDENT, Principal, User
from ....domain.errors import NotFound, PermissionDenied
from ....infrastructure.db import get_db
from ....infrastructure.repositories import UserRepository
from ....infrastructure.security import PasswordHasher, create_access_token
from ..authz import get_principal, require_admin
from ..ratelimit import limiter
from ..schemas import LoginReq, LoginResp, SignupReq, SignupResp, UserResp

router = APIRouter(prefix="/api", tags=["users"])


def to_resp(user: User) -> UserResp:
    # password hashes never reach this model
    return UserResp(
        id=user.id,
        first_name=user.first_name,
        last_name=user.last_name,
        email=user.email,
        phone=user.phone,
        birthday=user.birthday,
        program=user.program,
        username=user.username,
        role=user.role,
        user_code=user.user_code,
        created_at=user.created_at,
    )


@router.post("/signup", response_model=SignupResp, status_code=status.HTTP_201_CREATED)
@limiter.limit(f"{settings.RATE_LIMIT_PER_MINUTE}/minute")
def signup(request: Request, payload: SignupReq, db: Session = Depends(get_db)):
    uc = RegisterUser(
        repo=UserRepository(db),
        hasher=PasswordHasher(),
        max_attempts=settings.USER_ID_MAX_ATTEMPTS,
        suffix_digits=settings.USER_ID_SUFFIX_DIGITS,
    )
    user = uc.execute(SignupInput(
        first_name=payload.first_name,
        last_name=payload.last_name,
        email=payload.email,
        phone=payload.phone,
        birthday=payload.birthday,
        username=payload.username,
        password=payload.password,
        role=payload.role,
        program=payload.program,
    ))
    return SignupResp(message="User registered successfully!", user=to_resp(user))


@router.post("/login", response_model=LoginResp)
@limiter.limit(settings.LOGIN_RATE_LIMIT)
def login(request: Request, payload: LoginReq, db: Session = Depends(get_db)):
    user = AuthenticateUser(repo=UserRepository(db), hasher=PasswordHasher()).execute(
        payload.username, payload.password
    )
    token = create_access_token(user_id=user.id, username=user.username, role=user.role)
    return LoginResp(message="Login successful", user=to_resp(user), access_token=token)


@router.get("/me", response_model=UserResp)
def me(principal: Principal = Depends(get_principal), db: Session = Depends(get_db)):
    user = UserRepository(db).get_by_username(principal.username)
    if not user:
        raise NotFound("User not found.")
    return to_resp(user)


@router.get("/user/{username}", response_model=UserResp)
def get_user(username: str,
             principal: Principal = Depends(get_principal),
             db: Session = Depends(get_db)):
    if not principal.is_admin and principal.username != username:
        raise PermissionDenied("You may only view your own profile.")
    user = UserRepository(db).get_by_username(username)
    if not user:
        raise NotFound("User not found.")
    return to_resp(user)


@router.get("/students", response_model=list[UserResp], dependencies=[Depends(require_admin)])
def list_students(db: Session = Depends(get_db)):
    return [to_resp(u) for u in UserRepository(db).list_by_role(STUDENT)]
