"""Outgoing email: sender abstraction, the SES implementation and the welcome template."""

import html
import logging
from abc import ABC, abstractmethod
from typing import Any

from pydantic import BaseModel

logger = logging.getLogger(__name__)


class Recipient(BaseModel):
    email: str
    name: str | None = None

    def formatted(self) -> str:
        return f"{self.name} <{self.email}>" if self.name else self.email


class EmailSender(ABC):
    @abstractmethod
    def send(self, recipients: list[Recipient], subject: str, html_body: str) -> None: ...


class SesEmailSender(EmailSender):
    def __init__(self, ses_client: Any, sender: str) -> None:
        self._client = ses_client
        self._sender = sender

    def send(self, recipients: list[Recipient], subject: str, html_body: str) -> None:
        if not recipients:
            raise ValueError("At least one recipient is required")
        self._client.send_email(
            Source=self._sender,
            Destination={"ToAddresses": [r.formatted() for r in recipients]},
            Message={
                "Subject": {"Data": subject, "Charset": "UTF-8"},
                "Body": {"Html": {"Data": html_body, "Charset": "UTF-8"}},
            },
        )
        logger.info("Sent %r to %d recipient(s)", subject, len(recipients))


def render_welcome_email(first_name: str, app_name: str, app_url: str) -> str:
    name = html.escape(first_name)
    app = html.escape(app_name)
    url = html.escape(app_url, quote=True)
    return (
        "<!DOCTYPE html>"
        "<html><body style=\"font-family: Arial, sans-serif;\">"
        f"<h1>Welcome to {app}, {name}!</h1>"
        "<p>Your account has been created. You can now search flights and hotels "
        "and keep all your bookings in one place.</p>"
        f"<p><a href=\"{url}\">Start exploring</a></p>"
        f"<p>The {app} team</p>"
        "</body></html>"
    )
