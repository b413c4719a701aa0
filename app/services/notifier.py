import asyncio
import logging
import smtplib
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from email.message import EmailMessage
from email.utils import formataddr
from html import escape
from typing import Dict, Optional

from app.core.config import Settings, settings as default_settings
from app.core.exceptions import NotifierError
from app.utils.business_time import format_business_time

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OrderSnapshot:
    """Plain copy of a freshly created order, safe to use after the DB session closes."""
    id: int
    customer_name: str
    customer_phone: str
    customer_email: str
    items: str
    total: Decimal
    notes: str
    created_at: datetime

    @classmethod
    def from_order(cls, order) -> "OrderSnapshot":
        return cls(
            id=order.id,
            customer_name=order.customer_name,
            customer_phone=order.customer_phone,
            customer_email=order.customer_email or "",
            items=order.items,
            total=Decimal(str(order.total)),
            notes=order.notes or "",
            created_at=order.created_at,
        )


class Notifier:
    """
    Best-effort outbound notice about a new order.

    Subclasses implement ``deliver``. ``notify`` never raises: a failed
    delivery is logged and lost, the order itself is already saved.
    """

    name = "base"

    async def deliver(self, order: OrderSnapshot) -> None:
        raise NotImplementedError

    async def notify(self, order: OrderSnapshot) -> bool:
        try:
            await self.deliver(order)
            return True
        except NotifierError as e:
            logger.warning(f"Notification for order #{order.id} failed (order still saved): {e}")
        except Exception as e:
            logger.error(f"Unexpected {self.name} notifier error for order #{order.id}: {e}", exc_info=True)
        return False


class NullNotifier(Notifier):
    name = "null"

    async def deliver(self, order: OrderSnapshot) -> None:
        logger.info(f"Email not configured, skipping notification for order #{order.id}")


class EmailNotifier(Notifier):
    name = "email"

    def __init__(self, config: Settings):
        self.config = config
        self.sender = config.EMAIL_USER
        self.recipient = config.OWNER_EMAIL or config.EMAIL_USER

    def build_message(self, order: OrderSnapshot) -> Dict[str, str]:
        total = f"${order.total:.2f}"
        email = order.customer_email or "Not provided"
        received = format_business_time(order.created_at)
        footer = f"{self.config.BUSINESS_NAME} - {self.config.BUSINESS_LOCATION}"

        text_lines = [
            f"NEW ORDER #{order.id}",
            "",
            "CUSTOMER INFORMATION",
            f"- Name: {order.customer_name}",
            f"- Phone: {order.customer_phone}",
            f"- Email: {email}",
            "",
            "ORDER DETAILS",
            f"- Items: {order.items}",
            f"- Total: {total}",
        ]
        if order.notes:
            text_lines += ["", f"Notes: {order.notes}"]
        text_lines += [
            "",
            "Call the customer to confirm pickup!",
            "",
            footer,
            f"Time: {received}",
        ]

        phone_digits = "".join(ch for ch in order.customer_phone if ch.isdigit())
        notes_html = f"<p><strong>Customer Notes:</strong><br>{escape(order.notes)}</p>" if order.notes else ""
        html = (
            f"<h1>New Order!</h1><p>Order #{order.id}</p>"
            f"<h3>Customer Information</h3>"
            f"<p>Name: {escape(order.customer_name)}<br>"
            f"Phone: {escape(order.customer_phone)}<br>"
            f"Email: {escape(email)}</p>"
            f"<h3>Order Details</h3>"
            f"<p>Items: {escape(order.items)}</p>{notes_html}"
            f"<p><strong>Total: {total}</strong></p>"
            f'<p><a href="tel:{phone_digits}">Call Customer Now</a></p>'
            f"<p><small>{escape(footer)}<br>Order received at {received}</small></p>"
        )

        return {
            "to": self.recipient,
            "subject": f"New Order #{order.id} - {total} - {order.customer_name}",
            "text": "\n".join(text_lines),
            "html": html,
        }

    def _send(self, payload: Dict[str, str]) -> None:
        msg = EmailMessage()
        msg["From"] = formataddr((self.config.BUSINESS_NAME, self.sender))
        msg["To"] = payload["to"]
        msg["Subject"] = payload["subject"]
        msg.set_content(payload["text"])
        msg.add_alternative(payload["html"], subtype="html")

        with smtplib.SMTP_SSL(self.config.SMTP_HOST, self.config.SMTP_PORT, timeout=30) as smtp:
            smtp.login(self.sender, self.config.EMAIL_APP_PASS)
            smtp.send_message(msg)

    async def deliver(self, order: OrderSnapshot) -> None:
        payload = self.build_message(order)
        try:
            await asyncio.to_thread(self._send, payload)
        except (smtplib.SMTPException, OSError) as e:
            raise NotifierError(f"Email delivery failed: {e}") from e
        logger.info(f"Email notification for order #{order.id} sent to {self.recipient}")


def build_notifier(config: Optional[Settings] = None) -> Notifier:
    config = config or default_settings
    if config.email_enabled:
        logger.info("Email notifications enabled.")
        return EmailNotifier(config)
    logger.warning("Email not configured - set EMAIL_USER and EMAIL_APP_PASS to enable notifications.")
    return NullNotifier()
