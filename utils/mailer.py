"""SMTP email adapter.

Delivery is fire-and-forget: a missing configuration or a transport failure is
logged and reported through the return value, never raised to the caller.
"""

from __future__ import annotations

import logging
import smtplib
import ssl
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Mapping

from flask import current_app

logger = logging.getLogger(__name__)


def _smtp_settings(config: Mapping) -> dict | None:
    settings = {
        "host": config.get("SMTP_HOST"),
        "port": int(config.get("SMTP_PORT") or 465),
        "user": config.get("SMTP_USER"),
        "password": config.get("SMTP_PASSWORD"),
        "sender": config.get("SMTP_FROM") or config.get("SMTP_USER"),
    }
    if not (settings["host"] and settings["user"] and settings["password"] and settings["sender"]):
        return None
    return settings


def send_email(to_email: str, subject: str, html_body: str, text_body: str | None = None) -> bool:
    """Send an email using the SMTP credentials from the app config."""

    settings = _smtp_settings(current_app.config)
    if settings is None:
        logger.warning("SMTP configuration missing; skipping email to %s", to_email)
        return False

    msg = MIMEMultipart("alternative")
    msg["Subject"] = subject
    msg["From"] = settings["sender"]
    msg["To"] = to_email
    msg.attach(MIMEText(text_body or html_body, "plain", "utf-8"))
    msg.attach(MIMEText(html_body, "html", "utf-8"))

    try:
        if settings["port"] == 465:
            context = ssl.create_default_context()
            with smtplib.SMTP_SSL(settings["host"], settings["port"], context=context) as server:
                server.login(settings["user"], settings["password"])
                server.sendmail(settings["sender"], [to_email], msg.as_string())
        else:
            with smtplib.SMTP(settings["host"], settings["port"]) as server:
                server.ehlo()
                server.starttls(context=ssl.create_default_context())
                server.login(settings["user"], settings["password"])
                server.sendmail(settings["sender"], [to_email], msg.as_string())
    except (smtplib.SMTPException, OSError):
        logger.exception("Failed to send email to %s", to_email)
        return False

    logger.info("Sent '%s' email to %s", subject, to_email)
    return True
