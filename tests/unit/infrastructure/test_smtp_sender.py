from __future__ import annotations

import smtplib
from email.message import Message
from typing import Any

import pytest

from pokedex_api.infrastructure.mail import smtp_sender
from pokedex_api.infrastructure.mail.settings import SmtpSettings
from pokedex_api.infrastructure.mail.smtp_sender import SmtpEmailSender, bulk_subject, single_subject


class FakeSMTP:
    instances: list[FakeSMTP] = []
    fail_with: Exception | None = None

    def __init__(self, host: str, port: int, timeout: float) -> None:
        self.host = host
        self.port = port
        self.timeout = timeout
        self.started_tls = False
        self.login_args: tuple[str, str] | None = None
        self.sent: list[Message] = []
        FakeSMTP.instances.append(self)

    def __enter__(self) -> FakeSMTP:
        return self

    def __exit__(self, *exc: Any) -> None:
        return None

    def starttls(self) -> None:
        self.started_tls = True

    def login(self, user: str, password: str) -> None:
        self.login_args = (user, password)

    def send_message(self, msg: Message) -> None:
        if FakeSMTP.fail_with is not None:
            raise FakeSMTP.fail_with
        self.sent.append(msg)


@pytest.fixture(autouse=True)
def fake_smtp(monkeypatch: pytest.MonkeyPatch) -> type[FakeSMTP]:
    FakeSMTP.instances = []
    FakeSMTP.fail_with = None
    monkeypatch.setattr(smtp_sender.smtplib, "SMTP", FakeSMTP)
    return FakeSMTP


def _configured() -> SmtpSettings:
    return SmtpSettings(
        server="smtp.example.test",
        port=2525,
        username="mailer",
        password="s3cret",
        from_email="pokedex@example.test",
    )


def test_is_configured_requires_every_field() -> None:
    assert SmtpEmailSender(_configured()).is_configured()
    assert not SmtpEmailSender(SmtpSettings(server="smtp.example.test")).is_configured()
    assert not SmtpEmailSender(_configured().model_copy(update={"port": 0})).is_configured()


def test_subjects(make_item) -> None:
    assert single_subject(make_item(25, "pikachu")) == "Pokemon information: Pikachu"
    assert bulk_subject(3) == "Information for 3 selected Pokemon"


def test_render_single_escapes_recipient(make_item) -> None:
    html = SmtpEmailSender(_configured()).render_single(make_item(25, "pikachu"), "<Ash>")
    assert "&lt;Ash&gt;" in html
    assert "PIKACHU" in html


def test_render_bulk_lists_every_item(make_item) -> None:
    html = SmtpEmailSender(_configured()).render_bulk([make_item(1, "bulbasaur"), make_item(4, "charmander")])
    assert "Bulbasaur" in html
    assert "Charmander" in html


@pytest.mark.asyncio
async def test_send_delivers_html_message(make_item) -> None:
    sender = SmtpEmailSender(_configured())
    assert await sender.send(make_item(25, "pikachu"), "ash@example.test", "Ash") is True

    smtp = FakeSMTP.instances[-1]
    assert (smtp.host, smtp.port) == ("smtp.example.test", 2525)
    assert smtp.started_tls
    assert smtp.login_args == ("mailer", "s3cret")
    msg = smtp.sent[0]
    assert msg["To"] == "ash@example.test"
    assert msg["Subject"] == "Pokemon information: Pikachu"
    assert "pokedex@example.test" in msg["From"]


@pytest.mark.asyncio
async def test_send_when_unconfigured_returns_false(make_item) -> None:
    sender = SmtpEmailSender(SmtpSettings())
    assert await sender.send(make_item(1), "ash@example.test") is False
    assert FakeSMTP.instances == []


@pytest.mark.asyncio
async def test_send_failure_is_reported_not_raised(make_item) -> None:
    FakeSMTP.fail_with = smtplib.SMTPRecipientsRefused({})
    sender = SmtpEmailSender(_configured())
    assert await sender.send(make_item(1), "ash@example.test") is False


@pytest.mark.asyncio
async def test_send_bulk_counts_messages(make_item) -> None:
    sender = SmtpEmailSender(_configured())
    assert await sender.send_bulk([], "ash@example.test") == 0
    assert await sender.send_bulk([make_item(1), make_item(2)], "ash@example.test") == 1
    assert FakeSMTP.instances[-1].sent[0]["Subject"] == "Information for 2 selected Pokemon"
