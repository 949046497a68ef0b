# saivd/services/email.py

import html
import logging
import smtplib
from email.message import EmailMessage

from saivd.core import config
from saivd.core.validation import is_valid_email

logger = logging.getLogger(__name__)


class EmailConfigError(RuntimeError):
    pass


def _open_smtp() -> smtplib.SMTP:
    host, port = config.SES_SMTP_HOST, config.SES_SMTP_PORT
    user, password = config.SES_SMTP_USER, config.SES_SMTP_PASS
    if not host or not user or not password:
        raise EmailConfigError(
            "Missing SES SMTP configuration. Required: SES_SMTP_HOST, SES_SMTP_USER, SES_SMTP_PASS"
        )

    # Port 465 is implicit TLS, 25/587 upgrade with STARTTLS
    if port == 465:
        smtp = smtplib.SMTP_SSL(host, port, timeout=20)
    else:
        smtp = smtplib.SMTP(host, port, timeout=20)
        smtp.starttls()
    smtp.login(user, password)
    return smtp


def send_email(to: str, subject: str, html_body: str, text_body: str | None = None) -> None:
    if not config.SES_FROM_EMAIL:
        raise EmailConfigError("SES_FROM_EMAIL environment variable is not set")
    if not is_valid_email(to):
        raise ValueError(f"Invalid recipient address: {to!r}")

    msg = EmailMessage()
    msg["Subject"] = subject
    msg["From"] = f"{config.SES_FROM_NAME} <{config.SES_FROM_EMAIL}>"
    msg["To"] = to
    msg.set_content(text_body or "This message requires an HTML-capable email client.")
    msg.add_alternative(html_body, subtype="html")

    try:
        with _open_smtp() as smtp:
            smtp.send_message(msg)
    except Exception as e:
        logger.error("Error sending email to %s (%s): %s", to, subject, e)
        raise

    logger.info("Email sent to %s: %s", to, subject)


def send_watermark_complete_email(user_email: str, video_filename: str, display_name: str | None = None) -> None:
    videos_url = f"{config.PUBLIC_APP_URL}/dashboard/videos"
    greeting_name = display_name or user_email.split("@")[0]
    subject = f'Your watermarked video "{video_filename}" is ready!'

    text_body = (
        f"Hi {greeting_name},\n\n"
        f'Your video "{video_filename}" has been watermarked and is ready to view.\n\n'
        f"See it here: {videos_url}\n"
    )
    html_body = (
        f"<p>Hi {html.escape(greeting_name)},</p>"
        f"<p>Your video <strong>{html.escape(video_filename)}</strong> has been watermarked "
        f"and is ready to view.</p>"
        f'<p><a href="{html.escape(videos_url)}">Open your videos</a></p>'
    )
    send_email(user_email, subject, html_body, text_body)
