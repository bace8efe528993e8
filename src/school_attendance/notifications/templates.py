from __future__ import annotations

from datetime import date
from html import escape

from .model import Notice

DEFAULT_SCHOOL_LABEL = "School Administration"

_HTML = """\
<html>
  <body style="font-family: Arial, sans-serif; line-height: 1.6; color: #333;">
    <div style="max-width: 600px; margin: 0 auto; padding: 20px;">
      <h2 style="background-color: #4CAF50; color: white; padding: 20px; text-align: center;">Attendance Alert</h2>
      <p>Dear Parent,</p>
      <p>This is to inform you that <strong>{name}</strong> was marked as
         <span style="color: #d32f2f; font-weight: bold;">ABSENT</span> on <strong>{day}</strong>.</p>
      <p>If this is incorrect or if you have any concerns, please contact the school immediately.</p>
      <p style="font-size: 12px; text-align: center;">{school}<br>
         <em>This is an automated message. Please do not reply to this email.</em></p>
    </div>
  </body>
</html>
"""

_TEXT = """\
Attendance Alert

Dear Parent,

{name} was marked as ABSENT on {day}.

If this is incorrect, please contact the school.

- {school}"""


def format_day(day: date) -> str:
    return f"{day.day} {day.strftime('%B %Y')}"


def absence_notice(student_name: str, day: date, school_label: str) -> Notice:
    school = school_label or DEFAULT_SCHOOL_LABEL
    name = student_name or "Your child"
    when = format_day(day)
    return Notice(
        subject=f"Attendance Alert: {name} - {when}",
        text=_TEXT.format(name=name, day=when, school=school),
        html=_HTML.format(name=escape(name), day=escape(when), school=escape(school)),
    )
