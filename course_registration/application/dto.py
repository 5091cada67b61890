from dataclasses import dataclass
from datetime import date


@dataclass
class SignupInput:
    first_name: str
    last_name: str
    email: str
    phone: str
    birthday: date
    username: str
    password: str
    role: str = "student"
    program: str | None = None


@dataclass
class NewUserRecord:
    first_name: str
    last_name: str
    email: str
    phone: str
    birthday: date
    username: str
    password_hash: str
    role: str
    user_code: str
    program: str | None = None
