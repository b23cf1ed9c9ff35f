"""
Mail delivery.

Modules register message builders by key; callers send by key with params.
Delivery goes over SMTP, or into an in-memory outbox when
``MAIL_SUPPRESS_SEND`` is set (tests, local development).
"""

from __future__ import annotations

import smtplib
from dataclasses import dataclass
from email.mime.text import MIMEText
from email.utils import formatdate
from typing import Any, Callable, Dict, List, Mapping, Tuple

from flask import current_app

MailBuilder = Callable[[Mapping[str, Any]], Tuple[str, str]]

_templates: Dict[str, MailBuilder] = {}


@dataclass(frozen=True)
class MailMessage:
    key: str
    to: str
    subject: str
    body: str


def register_mail_template(key: str, builder: MailBuilder) -> None:
    """Register a builder returning ``(subject, body)`` for a message key."""
    _templates[key] = builder


def get_outbox() -> List[MailMessage]:
    return current_app.extensions.setdefault("mail_outbox", [])


def render_mail(key: str, to: str, params: Mapping[str, Any]) -> MailMessage:
    builder = _templates.get(key)
    if builder is None:
        raise KeyError(f"No mail template registered for '{key}'")
    subject, body = builder(params)
    return MailMessage(key=key, to=to, subject=subject, body=body)


def _deliver_smtp(message: MailMessage) -> None:
    config = current_app.config
    msg = MIMEText(message.body, 'plain', 'utf-8')
    msg['From'] = config['MAIL_DEFAULT_SENDER']
    msg['To'] = message.to
    msg['Subject'] = message.subject
    msg['Date'] = formatdate(localtime=True)

    with smtplib.SMTP(config['MAIL_SERVER'], config['MAIL_PORT']) as server:
        if config.get('MAIL_USE_TLS'):
            server.starttls()
        if config.get('MAIL_USERNAME'):
            server.login(config['MAIL_USERNAME'], config['MAIL_PASSWORD'])
        server.send_message(msg)


def send_mail(key: str, to: str, params: Mapping[str, Any]) -> bool:
    """Render and deliver a message. Returns False on failure, never raises."""

    if not to:
        current_app.logger.warning("Mail '%s' not sent: no recipient", key)
        return False

    try:
        message = render_mail(key, to, params)
    except Exception as e:
        current_app.logger.error("Mail '%s' could not be rendered: %s", key, e)
        return False

    if current_app.config.get('MAIL_SUPPRESS_SEND'):
        get_outbox().append(message)
        current_app.logger.debug("Mail '%s' to %s kept in outbox", key, to)
        return True

    try:
        _deliver_smtp(message)
    except (smtplib.SMTPException, OSError) as e:
        current_app.logger.error("Mail '%s' to %s failed: %s", key, to, e)
        return False

    current_app.logger.info("Mail '%s' sent to %s", key, to)
    return True
