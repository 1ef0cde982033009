from pydantic import Field, field_validator

from golobe.models.base import Document


class PhoneNumber(Document):
    number: str = Field(..., pattern=r"^\d+$")
    dial_code: str = Field(..., min_length=1)


class User(Document):
    first_name: str = Field(..., min_length=1)
    last_name: str = Field(..., min_length=1)
    email: str = Field(..., pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
    phone: PhoneNumber | None = None
    address: str | None = None
    profile_image: str | None = None
    email_verified: bool = False

    @field_validator("first_name", "last_name", "email", mode="before")
    @classmethod
    def strip_whitespace(cls, value: object) -> object:
        return value.strip() if isinstance(value, str) else value

    @field_validator("email")
    @classmethod
    def lowercase_email(cls, value: str) -> str:
        return value.lower()
