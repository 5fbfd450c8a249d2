"""Outbound account messages (reset links, username reminders)."""

import logging
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MailMessage:
    recipient: str
    subject: str
    body: str


class LogMailer:
    """Delivers account messages to the application log.

    Stands in for an SMTP sender in development and tests. Subclasses
    override ``deliver``; ``sent`` keeps every message handed over.
    """

    def __init__(self) -> None:
        self.sent: list[MailMessage] = []

    async def send(self, recipient: str, subject: str, body: str) -> None:
        message = MailMessage(recipient=recipient, subject=subject, body=body)
        self.sent.append(message)
        await self.deliver(message)

    async def deliver(self, message: MailMessage) -> None:
        logger.info("Mail to %s: %s\n%s", message.recipient, message.subject, message.body)
