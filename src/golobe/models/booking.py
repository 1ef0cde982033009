from datetime import date

from pydantic import Field, model_validator

from golobe.models.base import Document


class Booking(Document):
    user_id: str = Field(..., min_length=1)
    booking_type: str = Field(..., pattern="^(flight|hotel)$")
    reference_id: str = Field(..., min_length=1)
    status: str = Field(default="confirmed", pattern="^(pending|confirmed|cancelled)$")
    total_price: float = Field(..., ge=0, allow_inf_nan=False)
    currency: str = Field(default="USD", pattern="^[A-Z]{3}$")
    start_date: date
    end_date: date | None = None
    guests: int = Field(default=1, ge=1, le=9)

    @model_validator(mode="after")
    def end_not_before_start(self) -> "Booking":
        if self.end_date and self.end_date < self.start_date:
            raise ValueError("endDate must not be before startDate")
        return self
