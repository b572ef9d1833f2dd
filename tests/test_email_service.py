import asyncio

from whisperbox.services import email


def test_rendered_email_contains_code_and_escapes_username():
    html = email.render_verification_email("<b>al</b>", "123456")
    assert "123456" in html
    assert "<b>al</b>" not in html
    assert "&lt;b&gt;al&lt;/b&gt;" in html


def test_send_reports_success(monkeypatch):
    sent = []
    monkeypatch.setattr(email.resend.Emails, "send", lambda params: sent.append(params) or {"id": "e1"})

    assert asyncio.run(email.send_verification_email("a@x.com", "alice", "654321")) is True
    assert sent[0]["to"] == ["a@x.com"]
    assert sent[0]["from"] == "noreply@example.com"
    assert "654321" in sent[0]["html"]


def test_send_reports_failure_without_raising(monkeypatch):
    def boom(params):
        raise RuntimeError("resend is down")

    monkeypatch.setattr(email.resend.Emails, "send", boom)
    assert asyncio.run(email.send_verification_email("a@x.com", "alice", "654321")) is False
