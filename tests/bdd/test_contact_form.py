"""Behaviour tests for the contact form endpoint.

Backed by ``features/contact_form.feature``. The mailer is a pytest-mock
double so scenarios can assert how many deliveries were attempted.
"""

from __future__ import annotations

import json
import typing as typ
from pathlib import Path

import pytest
from pytest_bdd import given, parsers, scenarios, then, when

from landing_pages.contact import ContactHandler, MailTransportError, SmtpMailer

if typ.TYPE_CHECKING:
    from pytest_mock import MockerFixture

FEATURE_FILE = Path(__file__).resolve().parents[2] / "features" / "contact_form.feature"
scenarios(FEATURE_FILE)

ENQUIRY = {"name": "Mei", "email": "mei@example.com", "description": "Hello"}


@pytest.fixture
def scenario_state() -> dict[str, object]:
    """Return a mutable dict used to share scenario state across BDD steps."""
    return {}


@given("a contact handler with a working mailer")
def given_working_mailer(
    mocker: MockerFixture, scenario_state: dict[str, object]
) -> None:
    mailer = mocker.Mock(spec=SmtpMailer)
    scenario_state["mailer"] = mailer
    scenario_state["handler"] = ContactHandler(mailer)


@given("a contact handler with a failing mailer")
def given_failing_mailer(
    mocker: MockerFixture, scenario_state: dict[str, object]
) -> None:
    mailer = mocker.Mock(spec=SmtpMailer)
    mailer.send.side_effect = MailTransportError("connection refused")
    scenario_state["mailer"] = mailer
    scenario_state["handler"] = ContactHandler(mailer)


@when("an OPTIONS request arrives")
def when_options(scenario_state: dict[str, object]) -> None:
    handler: ContactHandler = scenario_state["handler"]  # type: ignore[assignment]
    scenario_state["response"] = handler.handle("OPTIONS", b"")


@when("a valid enquiry is posted")
def when_posted(scenario_state: dict[str, object]) -> None:
    handler: ContactHandler = scenario_state["handler"]  # type: ignore[assignment]
    scenario_state["response"] = handler.handle("POST", json.dumps(ENQUIRY))


@then(parsers.parse("the response status is {status:d}"))
def then_status(scenario_state: dict[str, object], status: int) -> None:
    response = scenario_state["response"]
    assert response.status == status, (  # type: ignore[attr-defined]
        f"expected status {status}, got {response.status}"  # type: ignore[attr-defined]
    )


@then(parsers.parse('the response message is "{message}"'))
def then_message(scenario_state: dict[str, object], message: str) -> None:
    response = scenario_state["response"]
    assert response.json() == {"message": message}, (  # type: ignore[attr-defined]
        f"expected message {message!r}"
    )


@then("no mail is sent")
def then_no_mail(scenario_state: dict[str, object]) -> None:
    scenario_state["mailer"].send.assert_not_called()  # type: ignore[attr-defined]


@then("exactly one mail is sent")
def then_one_mail(scenario_state: dict[str, object]) -> None:
    mailer = scenario_state["mailer"]
    assert mailer.send.call_count == 1, (  # type: ignore[attr-defined]
        f"expected one delivery attempt, got {mailer.send.call_count}"  # type: ignore[attr-defined]
    )
