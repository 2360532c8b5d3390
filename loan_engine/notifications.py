"""
Notification Dispatch

Sends a term sheet to a borrower by email, or opens an e-signature request.
The transport is injected; the default one only logs, so nothing leaves the
process until a real transport is configured.
"""

import logging
import re
from dataclasses import dataclass, field

from .models import DealInput, LoanTerms
from .term_sheet import TermSheetDocument, produce_document

logger = logging.getLogger(__name__)

EMAIL = "email"
E_SIGNATURE = "e_signature"
CHANNELS = (EMAIL, E_SIGNATURE)

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


@dataclass(frozen=True)
class Notification:
    """One outbound message handed to a transport."""

    channel: str
    recipient: str
    subject: str
    body: str
    record: dict
    attachment_name: str | None = None
    attachment: bytes | None = field(default=None, repr=False)


class LoggingTransport:
    """Transport that records the message in the log and reports success."""

    def send(self, notification: Notification) -> None:
        logger.info(
            f"[{notification.channel}] to={notification.recipient} "
            f"subject={notification.subject!r} attachment={notification.attachment_name}"
        )


class NotificationDispatcher:
    """Builds term sheet notifications and hands them to a transport."""

    def __init__(self, transport=None):
        self.transport = transport or LoggingTransport()

    def dispatch(self, terms: LoanTerms, deal: DealInput, recipient_email: str, channel: str = EMAIL) -> bool:
        """
        Send the term sheet over `channel`.

        Returns False (never raises) on a bad address, unknown channel or
        transport failure.
        """
        if channel not in CHANNELS:
            logger.error(f"Unknown notification channel: {channel}")
            return False

        if not isinstance(recipient_email, str) or not EMAIL_PATTERN.match(recipient_email):
            logger.error(f"Invalid recipient email: {recipient_email!r}")
            return False

        document = produce_document(terms, deal)
        if channel == EMAIL:
            notification = self._build_email(document, recipient_email)
        else:
            notification = self._build_e_signature(document, recipient_email)

        try:
            self.transport.send(notification)
        except Exception as e:
            logger.error(f"Error sending {channel} notification to {recipient_email}: {str(e)}", exc_info=True)
            return False

        logger.info(f"Term sheet {channel} dispatched for {deal.address}")
        return True

    def send_term_sheet(self, terms: LoanTerms, deal: DealInput, recipient_email: str) -> bool:
        return self.dispatch(terms, deal, recipient_email, EMAIL)

    def initiate_e_signature(self, terms: LoanTerms, deal: DealInput, recipient_email: str) -> bool:
        return self.dispatch(terms, deal, recipient_email, E_SIGNATURE)

    def _build_email(self, document: TermSheetDocument, recipient: str) -> Notification:
        name = document.record.borrower_name or "Borrower"
        return Notification(
            channel=EMAIL,
            recipient=recipient,
            subject=f"Loan Term Sheet - {document.record.address}",
            body=f"Hello {name},\n\nYour loan term sheet is attached.\n",
            record=document.record.to_dict(),
            attachment_name=document.filename,
            attachment=document.to_bytes(),
        )

    def _build_e_signature(self, document: TermSheetDocument, recipient: str) -> Notification:
        return Notification(
            channel=E_SIGNATURE,
            recipient=recipient,
            subject=f"Signature requested: Loan Term Sheet - {document.record.address}",
            body="Please review and sign the attached loan term sheet.\n",
            record=document.record.to_dict(),
            attachment_name=document.filename,
            attachment=document.to_bytes(),
        )


def dispatch_notification(terms: LoanTerms, deal: DealInput, recipient_email: str, channel: str = EMAIL) -> bool:
    """Send a term sheet with the default (logging) transport."""
    return NotificationDispatcher().dispatch(terms, deal, recipient_email, channel)
