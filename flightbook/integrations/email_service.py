"""
Transactional email via the SendGrid v3 API
Every attempt is recorded in the message_logs table
"""

import os
import logging
import httpx
from typing import Any, Dict, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from datetime import datetime, timezone

from ..models import MessageChannel, MessageLog, MessageStatus
from .email_templates import describe_flight, render_booking_cancellation, render_booking_confirmation

logger = logging.getLogger(__name__)

SENDGRID_URL = "https://api.sendgrid.com/v3/mail/send"


class EmailDeliveryError(Exception):
    """Raised when the provider rejects or fails a send."""


class EmailService:
    """SendGrid email dispatch."""

    def __init__(self):
        self.api_key = os.getenv("SENDGRID_API_KEY")
        self.from_email = os.getenv("SENDGRID_FROM_EMAIL", "noreply@flightbook.example")
        self.api_url = os.getenv("SENDGRID_URL", SENDGRID_URL)
        self.enabled = os.getenv("EMAIL_ENABLED", "false").lower() == "true"

        if not self.api_key and self.enabled:
            logger.warning("⚠️ Email enabled but SENDGRID_API_KEY not configured")

    async def send(
        self,
        template: str,
        to: str,
        subject: str,
        html: str,
        text: str,
        booking_reference: Optional[str] = None,
        db: AsyncSession = None,
    ) -> Dict[str, Any]:
        """
        Send one email.

        Args:
            template: Template name (booking_confirmation, booking_cancellation)
            to: Recipient address
            subject: Subject line
            html: HTML body
            text: Plain-text fallback
            booking_reference: Booking the email belongs to, for the log
            db: Database session for logging

        Raises:
            EmailDeliveryError: the provider call failed
        """
        log_entry = None
        if db:
            log_entry = MessageLog(
                channel=MessageChannel.EMAIL,
                template=template,
                recipient=to,
                subject=subject,
                booking_reference=booking_reference,
                provider="sendgrid",
                status=MessageStatus.PENDING,
            )
            db.add(log_entry)

        if not self.enabled:
            logger.info(f"📧 Email disabled - would send {template} to {to}")
            if log_entry:
                log_entry.status = MessageStatus.DISABLED
                await db.commit()
            return {"status": "disabled", "template": template, "to": to}

        if not self.api_key:
            if log_entry:
                log_entry.status = MessageStatus.FAILED
                log_entry.response_data = {"error": "SENDGRID_API_KEY not configured"}
                await db.commit()
            raise EmailDeliveryError("SENDGRID_API_KEY not configured")

        payload = {
            "personalizations": [{"to": [{"email": to}]}],
            "from": {"email": self.from_email},
            "subject": subject,
            "content": [
                {"type": "text/plain", "value": text},
                {"type": "text/html", "value": html},
            ],
        }

        try:
            async with httpx.AsyncClient() as client:
                response = await client.post(
                    self.api_url,
                    headers={
                        "Authorization": f"Bearer {self.api_key}",
                        "Content-Type": "application/json"
                    },
                    json=payload,
                    timeout=30.0
                )
        except httpx.HTTPError as e:
            if log_entry:
                log_entry.status = MessageStatus.FAILED
                log_entry.response_data = {"error": str(e)}
                await db.commit()
            logger.error(f"❌ Email error: {e}")
            raise EmailDeliveryError(str(e)) from e

        sent = response.status_code in (200, 202)
        result = {
            "status": "sent" if sent else "failed",
            "status_code": response.status_code,
            "template": template,
            "to": to,
        }

        if log_entry:
            log_entry.status = MessageStatus.SENT if sent else MessageStatus.FAILED
            log_entry.response_data = result
            log_entry.sent_at = datetime.now(timezone.utc) if sent else None
            await db.commit()

        if not sent:
            logger.error(f"SendGrid error: {response.status_code} - {response.text}")
            raise EmailDeliveryError(f"SendGrid returned {response.status_code}")

        logger.info(f"📧 Email {template} → {to}: sent")
        return result

    async def send_booking_confirmation(
        self,
        booking: Dict[str, Any],
        db: AsyncSession = None,
    ) -> Optional[Dict[str, Any]]:
        """Email the confirmation to the first passenger that has an address."""
        primary = next((p for p in booking.get("passengers", []) if p.get("email")), None)
        if not primary:
            logger.info(f"No passenger email for booking {booking['reference']}, skipping confirmation")
            return None

        reference = booking["reference"]
        return await self.send(
            template="booking_confirmation",
            to=primary["email"],
            subject=f"Booking Confirmation - {reference}",
            html=render_booking_confirmation(booking, primary),
            text=f"Your booking has been confirmed. Booking Reference: {reference}",
            booking_reference=reference,
            db=db,
        )

    async def send_booking_cancellation(
        self,
        booking: Dict[str, Any],
        cancellation_fee: float,
        refund_amount: float,
        db: AsyncSession = None,
    ) -> Optional[Dict[str, Any]]:
        primary = next((p for p in booking.get("passengers", []) if p.get("email")), None)
        if not primary:
            return None

        reference = booking["reference"]
        currency = booking.get("currency", "USD")
        return await self.send(
            template="booking_cancellation",
            to=primary["email"],
            subject=f"Booking Cancellation - {reference}",
            html=render_booking_cancellation(
                reference=reference,
                passenger_name=f"{primary['firstName']} {primary['lastName']}",
                flight_details=describe_flight(booking.get("flightData") or {}),
                cancellation_fee=cancellation_fee,
                refund_amount=refund_amount,
                currency=currency,
            ),
            text=f"Your booking {reference} has been cancelled. Refund amount: {currency} {refund_amount:.2f}",
            booking_reference=reference,
            db=db,
        )


email_service = EmailService()


def get_email_service() -> EmailService:
    return email_service
