# src/pokedex_api/infrastructure/mail/smtp_sender.py
# Copyright (c) Stacklion.
# SPDX-License-Identifier: MIT
"""SMTP email sender with Jinja2 HTML templates.

Renders ``item.html.j2`` (one item) or ``items.html.j2`` (a selection) and
delivers the message with :mod:`smtplib` in a worker thread so the event
loop is never blocked. Delivery problems are logged and reported through the
return value; nothing raises to the caller.
"""

from __future__ import annotations

import asyncio
import smtplib
from collections.abc import Sequence
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import formataddr
from pathlib import Path
from typing import Any, Final

from jinja2 import Environment, FileSystemLoader, TemplateError

from pokedex_api.application.interfaces.email_sender import EmailSenderPort
from pokedex_api.domain.entities.catalog_item import CatalogItem
from pokedex_api.infrastructure.logging.logger import get_json_logger
from pokedex_api.infrastructure.mail.settings import SmtpSettings

logger = get_json_logger(__name__)

TEMPLATE_DIR: Final[Path] = Path(__file__).parent / "templates"


def single_subject(item: CatalogItem) -> str:
    return f"Pokemon information: {item.display_name}"


def bulk_subject(count: int) -> str:
    return f"Information for {count} selected Pokemon"


def _item_context(item: CatalogItem) -> dict[str, Any]:
    return {
        "id": item.id,
        "name": item.display_name,
        "image_url": item.image_url,
        "height_m": f"{item.height / 10:.1f}",
        "weight_kg": f"{item.weight / 10:.1f}",
        "base_experience": item.base_experience,
        "types": item.type_names,
        "color": item.primary_type_color,
        "abilities": [a.name for a in item.abilities],
        "stats": [{"name": s.name, "value": s.base_stat} for s in item.stats],
    }


class SmtpEmailSender(EmailSenderPort):
    """:class:`EmailSenderPort` backed by smtplib and Jinja2."""

    def __init__(self, settings: SmtpSettings, *, template_dir: Path = TEMPLATE_DIR) -> None:
        self._settings = settings
        self._env = Environment(
            loader=FileSystemLoader(str(template_dir)),
            autoescape=True,
            trim_blocks=True,
            lstrip_blocks=True,
        )

    def is_configured(self) -> bool:
        s = self._settings
        password = s.password.get_secret_value() if s.password is not None else ""
        return bool(s.server and s.port > 0 and s.username and password and s.from_email)

    def render_single(self, item: CatalogItem, recipient_name: str = "") -> str:
        template = self._env.get_template("item.html.j2")
        return template.render(recipient_name=recipient_name, item=_item_context(item))

    def render_bulk(self, items: Sequence[CatalogItem], recipient_name: str = "") -> str:
        template = self._env.get_template("items.html.j2")
        return template.render(
            recipient_name=recipient_name,
            items=[_item_context(i) for i in items],
            count=len(items),
        )

    async def send(self, item: CatalogItem, recipient: str, recipient_name: str = "") -> bool:
        try:
            html = self.render_single(item, recipient_name)
        except TemplateError:
            logger.exception("email.render_failed", extra={"template": "item.html.j2"})
            return False
        return await self._deliver(single_subject(item), html, recipient)

    async def send_bulk(
        self,
        items: Sequence[CatalogItem],
        recipient: str,
        recipient_name: str = "",
    ) -> int:
        if not items:
            return 0
        try:
            html = self.render_bulk(items, recipient_name)
        except TemplateError:
            logger.exception("email.render_failed", extra={"template": "items.html.j2"})
            return 0
        delivered = await self._deliver(bulk_subject(len(items)), html, recipient)
        return 1 if delivered else 0

    async def _deliver(self, subject: str, html: str, recipient: str) -> bool:
        if not self.is_configured():
            logger.warning("email.not_configured", extra={"recipient": recipient})
            return False
        try:
            await asyncio.to_thread(self._send_sync, subject, html, recipient)
        except (smtplib.SMTPException, OSError) as exc:
            logger.error(
                "email.send_failed",
                extra={"recipient": recipient, "error_type": type(exc).__name__},
            )
            return False
        logger.info("email.sent", extra={"recipient": recipient, "subject": subject})
        return True

    def _send_sync(self, subject: str, html: str, recipient: str) -> None:
        s = self._settings
        msg = MIMEMultipart("alternative")
        msg["Subject"] = subject
        msg["From"] = formataddr((s.from_name, s.from_email))
        msg["To"] = recipient
        msg.attach(MIMEText(html, "html", "utf-8"))

        password = s.password.get_secret_value() if s.password is not None else ""
        with smtplib.SMTP(s.server, s.port, timeout=s.timeout_s) as server:
            if s.use_tls:
                server.starttls()
            server.login(s.username, password)
            server.send_message(msg)
