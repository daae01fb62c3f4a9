"""Contact form handler that forwards enquiries by email.

The landing page posts its contact form as JSON to a small serverless
endpoint. :class:`ContactHandler` implements that endpoint independently of
any hosting framework: it answers CORS pre-flight probes, rejects other
methods, validates the payload, and hands a :class:`ContactSubmission` to a
mailer exactly once. :func:`make_wsgi_app` adapts it for WSGI hosts.

Example
-------
>>> from landing_pages.config import ContactConfig
>>> from landing_pages.contact import ContactHandler, SmtpMailer
>>> mailer = SmtpMailer(ContactConfig(recipient="studio@example.com"),
...                     username="bot@example.com", password="app-pass")
>>> handler = ContactHandler(mailer)
>>> handler.handle("OPTIONS", b"").status
200
"""

from __future__ import annotations

import collections.abc as cabc
import dataclasses as dc
import json
import logging
import os
import smtplib
import typing as typ
from email.message import EmailMessage
from email.utils import formataddr
from http import HTTPStatus

if typ.TYPE_CHECKING:
    from .config import ContactConfig

logger = logging.getLogger(__name__)

MAIL_USER_ENV = "MAIL_USER"
MAIL_PASS_ENV = "MAIL_PASS"

SUCCESS_MESSAGE = "Message sent"
FAILURE_MESSAGE = "Failed to send"

_FIELD_ALIASES: dict[str, tuple[str, ...]] = {
    "name": ("name",),
    "email": ("email",),
    "contact_id": ("contact_id", "contactId", "line"),
    "start_date": ("start_date", "startDate"),
    "end_date": ("end_date", "endDate"),
    "description": ("description",),
}
# Copied into mail headers, which cannot span lines.
_HEADER_FIELDS = ("name", "email")
_LINE_BREAKS = frozenset("\r\n")


class MailTransportError(RuntimeError):
    """Raised when the mail server cannot be reached or rejects a message."""


class InvalidSubmissionError(ValueError):
    """Raised when a contact payload lacks required fields."""


@dc.dataclass(frozen=True, slots=True)
class ContactSubmission:
    """One contact form submission."""

    name: str
    email: str
    contact_id: str = ""
    start_date: str = ""
    end_date: str = ""
    description: str = ""

    @classmethod
    def from_mapping(cls, payload: cabc.Mapping[str, typ.Any]) -> ContactSubmission:
        """Build a submission from form JSON, accepting camelCase keys.

        Raises
        ------
        InvalidSubmissionError
            If ``name`` or ``email`` is missing or blank, or spans more than
            one line.
        """
        values: dict[str, str] = {}
        for field, aliases in _FIELD_ALIASES.items():
            for alias in aliases:
                value = payload.get(alias)
                if value is not None and str(value).strip():
                    values[field] = str(value).strip()
                    break
        missing = [key for key in _HEADER_FIELDS if key not in values]
        if missing:
            msg = f"Contact submission is missing {', '.join(missing)}."
            raise InvalidSubmissionError(msg)
        multiline = [
            key for key in _HEADER_FIELDS if _LINE_BREAKS.intersection(values[key])
        ]
        if multiline:
            msg = f"Contact submission {', '.join(multiline)} must be a single line."
            raise InvalidSubmissionError(msg)
        return cls(**values)

    def render_text(self) -> str:
        """Return the plain-text email body."""
        return "\n".join(
            [
                f"Name: {self.name}",
                f"Email: {self.email}",
                f"Contact ID: {self.contact_id or '-'}",
                f"Start date: {self.start_date or '-'}",
                f"End date: {self.end_date or '-'}",
                "Description:",
                self.description or "-",
                "",
            ]
        )


class Mailer(typ.Protocol):
    """Anything able to deliver a submission."""

    def send(self, submission: ContactSubmission) -> None: ...


class SmtpMailer:
    """Deliver submissions through an authenticated SMTP server."""

    def __init__(
        self,
        config: ContactConfig,
        *,
        username: str,
        password: str,
        smtp_factory: cabc.Callable[..., smtplib.SMTP] = smtplib.SMTP,
    ) -> None:
        self.config = config
        self.username = username
        self._password = password
        self._smtp_factory = smtp_factory

    @classmethod
    def from_env(cls, config: ContactConfig) -> SmtpMailer:
        """Create a mailer with credentials from ``MAIL_USER``/``MAIL_PASS``."""
        username = os.getenv(MAIL_USER_ENV)
        password = os.getenv(MAIL_PASS_ENV)
        if not username or not password:
            msg = f"Set {MAIL_USER_ENV} and {MAIL_PASS_ENV} to send contact mail."
            raise MailTransportError(msg)
        return cls(config, username=username, password=password)

    def build_message(self, submission: ContactSubmission) -> EmailMessage:
        message = EmailMessage()
        message["From"] = formataddr((self.config.sender_name, self.username))
        message["To"] = self.config.recipient
        message["Reply-To"] = submission.email
        message["Subject"] = f"New enquiry: {submission.name}"
        message.set_content(submission.render_text())
        return message

    def send(self, submission: ContactSubmission) -> None:
        """Send one message; no retry is attempted.

        Raises
        ------
        MailTransportError
            When the message cannot be built or on connection, authentication,
            or delivery failure.
        """
        try:
            message = self.build_message(submission)
        except ValueError as exc:
            msg = f"Cannot build a message from the submission: {exc}"
            raise MailTransportError(msg) from exc
        try:
            with self._smtp_factory(
                self.config.smtp_host,
                self.config.smtp_port,
                timeout=self.config.timeout,
            ) as smtp:
                if self.config.use_tls:
                    smtp.starttls()
                smtp.login(self.username, self._password)
                smtp.send_message(message)
        except (smtplib.SMTPException, OSError) as exc:
            msg = f"SMTP delivery via {self.config.smtp_host} failed: {exc}"
            raise MailTransportError(msg) from exc
        logger.info("Contact mail sent for %s", submission.email)


@dc.dataclass(slots=True)
class HandlerResponse:
    """Status, headers, and body returned by :class:`ContactHandler`."""

    status: int
    headers: dict[str, str] = dc.field(default_factory=dict)
    body: bytes = b""

    def json(self) -> typ.Any:
        return json.loads(self.body.decode("utf-8")) if self.body else None


class ContactHandler:
    """Serverless endpoint that forwards contact form posts to a mailer."""

    def __init__(self, mailer: Mailer, *, allowed_origin: str = "*") -> None:
        self.mailer = mailer
        self.allowed_origin = allowed_origin

    def cors_headers(self) -> dict[str, str]:
        return {
            "Access-Control-Allow-Origin": self.allowed_origin,
            "Access-Control-Allow-Methods": "POST, OPTIONS",
            "Access-Control-Allow-Headers": "Content-Type",
        }

    def handle(
        self, method: str, body: bytes | str | cabc.Mapping[str, typ.Any] | None
    ) -> HandlerResponse:
        """Process one request and return the response to send back."""
        verb = method.upper()
        if verb == "OPTIONS":
            return HandlerResponse(HTTPStatus.OK, self.cors_headers())
        if verb != "POST":
            return self._text(HTTPStatus.METHOD_NOT_ALLOWED, "Method Not Allowed")

        try:
            submission = ContactSubmission.from_mapping(_decode_body(body))
        except InvalidSubmissionError as exc:
            return self._json(HTTPStatus.BAD_REQUEST, {"message": str(exc)})

        try:
            self.mailer.send(submission)
        except MailTransportError as exc:
            logger.error("Contact mail failed: %s", exc)
            return self._json(
                HTTPStatus.INTERNAL_SERVER_ERROR, {"message": FAILURE_MESSAGE}
            )
        return self._json(HTTPStatus.OK, {"message": SUCCESS_MESSAGE})

    def _json(self, status: int, payload: cabc.Mapping[str, typ.Any]) -> HandlerResponse:
        headers = self.cors_headers()
        headers["Content-Type"] = "application/json; charset=utf-8"
        body = json.dumps(payload, ensure_ascii=False).encode("utf-8")
        return HandlerResponse(status, headers, body)

    def _text(self, status: int, text: str) -> HandlerResponse:
        headers = self.cors_headers()
        headers["Content-Type"] = "text/plain; charset=utf-8"
        return HandlerResponse(status, headers, text.encode("utf-8"))


def _decode_body(
    body: bytes | str | cabc.Mapping[str, typ.Any] | None,
) -> cabc.Mapping[str, typ.Any]:
    """Return the request body as a mapping, raising on anything else."""
    if isinstance(body, cabc.Mapping):
        return body
    if not body:
        msg = "Contact submission body is empty."
        raise InvalidSubmissionError(msg)
    try:
        payload = json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        msg = "Contact submission body is not valid JSON."
        raise InvalidSubmissionError(msg) from exc
    if not isinstance(payload, dict):
        msg = "Contact submission body must be a JSON object."
        raise InvalidSubmissionError(msg)
    return payload


def make_wsgi_app(handler: ContactHandler) -> cabc.Callable[..., list[bytes]]:
    """Expose ``handler`` as a WSGI application."""

    def application(
        environ: dict[str, typ.Any], start_response: cabc.Callable[..., typ.Any]
    ) -> list[bytes]:
        method = environ.get("REQUEST_METHOD", "GET")
        try:
            length = int(environ.get("CONTENT_LENGTH") or 0)
        except ValueError:
            length = 0
        body = environ["wsgi.input"].read(length) if length > 0 else b""
        response = handler.handle(method, body)
        status = HTTPStatus(response.status)
        start_response(f"{status.value} {status.phrase}", list(response.headers.items()))
        return [response.body]

    return application


__all__ = [
    "FAILURE_MESSAGE",
    "SUCCESS_MESSAGE",
    "ContactHandler",
    "ContactSubmission",
    "HandlerResponse",
    "InvalidSubmissionError",
    "MailTransportError",
    "Mailer",
    "SmtpMailer",
    "make_wsgi_app",
]
