from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field


class UserRole(str, Enum):
    STUDENT = "student"
    TEACHER = "teacher"


class User(BaseModel):
    """The signed-in account as reported by ``/api/users/me/``."""

    id: int
    username: str
    email: str = ""
    first_name: str = ""
    last_name: str = ""
    role: UserRole
    section: str | None = None
    course: str | None = None
    year_level: int | None = None

    model_config = {"extra": "ignore", "frozen": True}

    @property
    def full_name(self) -> str:
        name = f"{self.first_name} {self.last_name}".strip()
        return name or self.username

    @property
    def is_teacher(self) -> bool:
        return self.role is UserRole.TEACHER


class LoginCredentials(BaseModel):
    username: str = Field(min_length=1)
    password: str = Field(min_length=1)


class SignupData(BaseModel):
    username: str = Field(min_length=1)
    email: str = Field(min_length=1)
    password: str = Field(min_length=1)
    first_name: str = ""
    last_name: str = ""
    role: UserRole = UserRole.STUDENT
    section: str | None = None
    course: str | None = None
    year_level: int | None = None


class TokenPair(BaseModel):
    access: str
    refresh: str

    model_config = {"extra": "ignore"}
