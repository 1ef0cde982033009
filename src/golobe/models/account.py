from pydantic import Field

from golobe.models.base import Document


class Account(Document):
    user_id: str = Field(..., min_length=1)
    type: str = Field(..., pattern="^(credentials|oauth)$")
    provider: str = Field(..., min_length=1)
    provider_account_id: str = Field(..., min_length=1)
    password: str | None = None
