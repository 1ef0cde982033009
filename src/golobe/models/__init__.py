"""
Pydantic document models for Golobe.
"""

from golobe.models.account import Account
from golobe.models.analytics import ANALYTICS_DOCUMENT_ID, Analytics
from golobe.models.base import Document
from golobe.models.booking import Booking
from golobe.models.user import PhoneNumber, User

__all__ = ["ANALYTICS_DOCUMENT_ID", "Account", "Analytics", "Booking", "Document", "PhoneNumber", "User"]
