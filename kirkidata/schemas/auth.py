from enum import Enum

from pydantic import EmailStr

from kirkidata.schemas.common import CamelModel


class Role(str, Enum):
    USER = "user"
    ADMIN = "admin"


class TokenPair(CamelModel):
    access_token: str
    refresh_token: str


class RefreshRequest(CamelModel):
    refresh_token: str
    role: Role


class RegisterRequest(CamelModel):
    first_name: str
    last_name: str
    email: EmailStr
    phone: str
    password: str
    pin: str


class LoginRequest(CamelModel):
    phone: str
    password: str


class AdminLoginRequest(CamelModel):
    email: EmailStr
    password: str


class PasswordResetRequest(CamelModel):
    email: EmailStr


class ResetPasswordRequest(CamelModel):
    email: EmailStr
    otp: str
    new_password: str


class ChangePinRequest(CamelModel):
    current_pin: str
    new_pin: str


class ChangePasswordRequest(CamelModel):
    current_password: str
    new_password: str


class ForgotPinRequest(CamelModel):
    current_password: str
    new_pin: str
