"""Email service for order notifications"""

import smtplib
import asyncio
import logging
from email.mime.text import MIMEText
from email.mime.multipart import MIMEMultipart
from typing import Optional

from ...core.config import settings
from ...domain.value_objects.money import format_cents

logger = logging.getLogger(__name__)


class EmailService:

    def __init__(self):
        self.smtp_host = settings.SMTP_HOST
        self.smtp_port = settings.SMTP_PORT
        self.smtp_username = settings.SMTP_USERNAME
        self.smtp_password = settings.SMTP_PASSWORD
        self.smtp_use_tls = settings.SMTP_USE_TLS
        self.from_email = settings.FROM_EMAIL
        self.from_name = settings.FROM_NAME
        self.frontend_url = settings.FRONTEND_URL

    @property
    def is_configured(self) -> bool:
        return bool(self.smtp_host)

    async def send_email(self,
                         to_email: str,
                         subject: str,
                         html_content: str,
                         text_content: Optional[str] = None) -> bool:
        """Send email with HTML content and an optional plain text part"""
        if not self.is_configured:
            logger.warning("SMTP_HOST not configured, skipping email to %s: %s", to_email, subject)
            return False

        msg = MIMEMultipart('alternative')
        msg['Subject'] = subject
        msg['From'] = f"{self.from_name} <{self.from_email}>"
        msg['To'] = to_email

        if text_content:
            msg.attach(MIMEText(text_content, 'plain'))
        msg.attach(MIMEText(html_content, 'html'))

        try:
            await self._send_smtp_email(msg)
        except (smtplib.SMTPException, OSError) as e:
            logger.error("Error sending email to %s: %s", to_email, e)
            return False

        logger.info("Email sent to %s: %s", to_email, subject)
        return True

    async def _send_smtp_email(self, msg: MIMEMultipart):
        """Send email via SMTP"""
        def send_sync():
            with smtplib.SMTP(self.smtp_host, self.smtp_port) as server:
                if self.smtp_use_tls:
                    server.starttls()
                if self.smtp_username:
                    server.login(self.smtp_username, self.smtp_password)
                server.send_message(msg)

        # Run in thread pool to avoid blocking
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(None, send_sync)

    async def send_order_confirmation(self, order) -> bool:
        """Send the receipt for a paid order.

        `order` is an OrderModel with its items loaded.
        """
        if not order.email:
            logger.info("Order %s has no email, skipping confirmation", order.order_number)
            return False

        subject = f"Order confirmed: {order.order_number}"
        order_url = f"{self.frontend_url}/orders/{order.id}?email={order.email}"

        rows = []
        lines = []
        for item in order.items:
            name = item.title if not item.variant_title else f"{item.title} ({item.variant_title})"
            line_total = format_cents(item.price_cents * item.quantity)
            rows.append(f"<tr><td>{name}</td><td>{item.quantity}</td><td>{line_total}</td></tr>")
            lines.append(f"{name} x{item.quantity}  {line_total}")

        totals = [
            ("Subtotal", order.subtotal_cents),
            ("Discount", -(order.discount_cents or 0) if order.discount_cents else None),
            ("Shipping", order.shipping_cents),
            ("Tax", order.tax_cents),
            ("Total", order.total_cents),
        ]
        total_rows = ''.join(
            f"<tr><td colspan='2'>{label}</td><td>{format_cents(value)}</td></tr>"
            for label, value in totals if value is not None
        )
        total_lines = '\n'.join(
            f"{label}: {format_cents(value)}" for label, value in totals if value is not None
        )

        html_content = f"""
        <!DOCTYPE html>
        <html>
        <head>
            <style>
                body {{ font-family: Arial, sans-serif; line-height: 1.6; color: #333; }}
                .container {{ max-width: 600px; margin: 0 auto; padding: 20px; }}
                table {{ width: 100%; border-collapse: collapse; }}
                td {{ padding: 6px 0; border-bottom: 1px solid #eee; }}
                .button {{ display: inline-block; padding: 12px 24px; background: #111; color: #fff; text-decoration: none; border-radius: 4px; }}
            </style>
        </head>
        <body>
            <div class="container">
                <h2>Thank you for your order!</h2>
                <p>We received your payment for order <strong>{order.order_number}</strong>.</p>
                <table>
                    {''.join(rows)}
                    {total_rows}
                </table>
                <p><a class="button" href="{order_url}">View your order</a></p>
                <p>{self.from_name}</p>
            </div>
        </body>
        </html>
        """

        text_content = (
            f"Thank you for your order!\n\n"
            f"Order {order.order_number}\n\n"
            + '\n'.join(lines)
            + f"\n\n{total_lines}\n\nView your order: {order_url}\n"
        )

        return await self.send_email(order.email, subject, html_content, text_content)
