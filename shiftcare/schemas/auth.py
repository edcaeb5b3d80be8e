"""인증 관련 Pydantic 요청/응답 스키마 정의.

Authentication-related Pydantic request/response schema definitions.
Covers registration, login, and token issuance.
"""

from datetime import date

from pydantic import BaseModel, Field

# 가입 폼 이메일 형식 (Email format accepted by the signup form)
EMAIL_PATTERN = r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$"


class RegisterRequest(BaseModel):
    """직원 회원가입 요청 스키마.

    Staff self-registration request schema. New accounts start un-admitted
    and must be admitted by an admin before they can be assigned shifts.

    Attributes:
        first_name: 이름 (First name)
        last_name: 성 (Last name)
        email: 이메일 (Login email)
        password: 비밀번호 (Plain text, bcrypt-hashed on server, min 6 chars)
        phone_number: 전화번호 (Phone number)
        date_of_birth: 생년월일 (Date of birth)
    """

    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    email: str = Field(..., pattern=EMAIL_PATTERN)
    password: str = Field(..., min_length=6)  # 최소 6자 (At least 6 characters)
    phone_number: str = Field(..., min_length=1, max_length=50)
    date_of_birth: date | None = None


class LoginRequest(BaseModel):
    """로그인 요청 스키마 (Login request for admins and staff)."""

    email: str = Field(..., pattern=EMAIL_PATTERN)
    password: str


class TokenResponse(BaseModel):
    """JWT 토큰 발급 응답 스키마.

    Attributes:
        access_token: JWT 액세스 토큰 (Access token)
        token_type: 토큰 유형 (Always "bearer")
        user_id: 사용자 UUID 문자열 (User identifier)
        role: 역할 (Role: "admin" | "user")
    """

    access_token: str
    token_type: str = "bearer"
    user_id: str
    role: str
