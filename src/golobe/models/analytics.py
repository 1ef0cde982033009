"""Global counters document. A single item with id ``global`` holds them all."""

from golobe.models.base import Document

ANALYTICS_DOCUMENT_ID = "global"


class Analytics(Document):
    total_users_signed_up: int = 0
    total_flight_bookings: int = 0
    total_hotel_bookings: int = 0
    total_bookings_cancelled: int = 0
