import smtplib
from datetime import date

from school_attendance.notifications import smtp_sender
from school_attendance.notifications.smtp_sender import SmtpConfig, SmtpNotificationSender
from school_attendance.notifications.templates import absence_notice


class FakeSMTP:
    instances = []

    def __init__(self, host, port, timeout=None):
        self.host, self.port = host, port
        self.calls = []
        self.messages = []
        FakeSMTP.instances.append(self)

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def starttls(self):
        self.calls.append("starttls")

    def login(self, user, password):
        self.calls.append(("login", user))

    def send_message(self, msg):
        self.messages.append(msg)


class RefusingSMTP(FakeSMTP):
    def send_message(self, msg):
        raise smtplib.SMTPRecipientsRefused({msg["To"]: (550, b"no such user")})


def test_send_builds_multipart_message(monkeypatch):
    FakeSMTP.instances = []
    monkeypatch.setattr(smtp_sender.smtplib, "SMTP", FakeSMTP)
    sender = SmtpNotificationSender(SmtpConfig(host="mail.test", user="office@school.test", password="x"))

    result = sender.send(7, "parent@example.com", date(2024, 6, 20), "Green Valley School", student_name="Asha")

    assert result.success
    smtp = FakeSMTP.instances[0]
    assert smtp.calls == ["starttls", ("login", "office@school.test")]
    msg = smtp.messages[0]
    assert msg["To"] == "parent@example.com"
    assert msg["Subject"] == "Attendance Alert: Asha - 20 June 2024"
    assert msg.get_body(preferencelist=("html",)) is not None


def test_refused_recipient_is_a_failed_result(monkeypatch):
    monkeypatch.setattr(smtp_sender.smtplib, "SMTP", RefusingSMTP)
    sender = SmtpNotificationSender(SmtpConfig(host="mail.test"))

    result = sender.send(7, "nobody@example.com", date(2024, 6, 20), "Green Valley School")

    assert not result.success
    assert result.error


def test_template_escapes_html_and_falls_back():
    notice = absence_notice("<b>Asha</b>", date(2024, 6, 1), "")

    assert "&lt;b&gt;Asha&lt;/b&gt;" in notice.html
    assert "School Administration" in notice.text
    assert absence_notice("", date(2024, 6, 1), "X").subject == "Attendance Alert: Your child - 1 June 2024"
