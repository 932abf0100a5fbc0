"""
Tests for the confirmation page guard and the form page flow.
"""

from fastapi import status

from portfolio_site.forms.guard import ConfirmationGuard
from portfolio_site.web.session import SESSION_COOKIE_PREFIX

THANKS_HEADING = "お問い合わせありがとうございます"


def test_guard_redirects_without_marker():
    storage = {}

    decision = ConfirmationGuard().check(storage)

    assert decision.allowed is False
    assert decision.redirect_to == "/contact"


def test_guard_consumes_marker():
    storage = {"fromContact": "true"}
    guard = ConfirmationGuard()

    assert guard.check(storage).allowed is True
    assert "fromContact" not in storage
    assert guard.check(storage).allowed is False


def test_guard_treats_empty_marker_as_absent():
    assert ConfirmationGuard().check({"fromContact": ""}).allowed is False


def test_direct_visit_to_thanks_redirects_to_contact(client):
    response = client.get("/thanks", follow_redirects=False)

    assert response.status_code == status.HTTP_303_SEE_OTHER
    assert response.headers["location"] == "/contact"
    assert THANKS_HEADING not in response.text


def test_submission_lands_on_thanks_once(client, outbox, valid_form):
    response = client.post("/contact", data=valid_form)

    assert response.status_code == status.HTTP_200_OK
    assert response.history[0].status_code == status.HTTP_303_SEE_OTHER
    assert response.url.path == "/thanks"
    assert THANKS_HEADING in response.text
    assert len(outbox.messages) == 2

    # marker was consumed; a refresh goes back to the form
    refresh = client.get("/thanks", follow_redirects=False)
    assert refresh.status_code == status.HTTP_303_SEE_OTHER
    assert refresh.headers["location"] == "/contact"


def test_marker_cookie_is_session_scoped(client, outbox, valid_form):
    response = client.post("/contact", data=valid_form, follow_redirects=False)

    assert response.status_code == status.HTTP_303_SEE_OTHER
    set_cookie = response.headers["set-cookie"]
    assert set_cookie.startswith(f"{SESSION_COOKIE_PREFIX}fromContact=true")
    assert "HttpOnly" in set_cookie
    assert "Max-Age" not in set_cookie
    assert "expires" not in set_cookie.lower()


def test_invalid_form_is_rerendered_with_errors(client, outbox, valid_form):
    valid_form["email"] = "not-an-email"

    response = client.post("/contact", data=valid_form, follow_redirects=False)

    assert response.status_code == status.HTTP_200_OK
    assert "有効なメールアドレスを入力してください" in response.text
    assert 'value="山田太郎"' in response.text
    assert outbox.attempts == 0
    assert client.get("/thanks", follow_redirects=False).status_code == status.HTTP_303_SEE_OTHER


def test_delivery_failure_shows_notice_and_keeps_input(client, outbox, valid_form):
    outbox.fail(1)

    response = client.post("/contact", data=valid_form, follow_redirects=False)

    assert response.status_code == status.HTTP_200_OK
    assert "送信に失敗しました。もう一度お試しください。" in response.text
    assert 'value="Tokyo"' in response.text
    assert client.get("/thanks", follow_redirects=False).status_code == status.HTTP_303_SEE_OTHER


def test_stepped_form_walks_both_steps(client, outbox, valid_form):
    step_one = {k: valid_form[k] for k in ("name", "email", "address")}

    response = client.post("/contact", data={**step_one, "theme": "stepped", "step": "1", "action": "next"})
    assert response.status_code == status.HTTP_200_OK
    assert 'name="step" value="2"' in response.text
    assert 'type="hidden" name="name" value="山田太郎"' in response.text

    response = client.post(
        "/contact",
        data={
            **step_one,
            "theme": "stepped",
            "step": "2",
            "message": "hello",
            "termOfService": "agreed",
            "g-recaptcha-response": "tok",
            "action": "submit",
        },
    )
    assert response.url.path == "/thanks"
    assert THANKS_HEADING in response.text
    assert len(outbox.messages) == 2


def test_stepped_form_cannot_skip_step_one(client, outbox):
    response = client.post("/contact", data={"theme": "stepped", "step": "1", "action": "next"})

    assert 'name="step" value="1"' in response.text
    assert "名前を入力してください" in response.text


def test_stepped_form_back_keeps_values(client):
    response = client.post(
        "/contact",
        data={"theme": "stepped", "step": "2", "name": "山田太郎", "message": "hello", "action": "back"},
    )

    assert 'name="step" value="1"' in response.text
    assert 'value="山田太郎"' in response.text
    assert 'type="hidden" name="message" value="hello"' in response.text
