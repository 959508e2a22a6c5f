"""HTML bodies for transactional emails."""

from html import escape

_SHELL = """<!DOCTYPE html>
<html>
<head><meta charset="UTF-8"><title>{title}</title></head>
<body style="background-color:#ffffff;font-family:Arial,sans-serif;font-size:16px;line-height:1.4;color:#333333;margin:0;padding:0;">
  <div style="max-width:600px;margin:0 auto;padding:20px;text-align:center;">
    <div style="font-size:18px;font-weight:bold;margin-bottom:20px;">{title}</div>
    <div style="font-size:16px;margin-bottom:20px;">{body}</div>
    <div style="font-size:14px;color:#999999;margin-top:20px;">
      If you have any questions or need assistance, please reach out to us at
      <a href="mailto:{support}">{support}</a>. We are here to help!
    </div>
  </div>
</body>
</html>"""

SUPPORT_EMAIL = "info@studyhub.local"


def course_enrollment_email(course_name: str, name: str) -> str:
    body = (
        f"<p>Dear {escape(name)},</p>"
        f"<p>You have successfully registered for the course "
        f"<strong>\"{escape(course_name)}\"</strong>. We are excited to have you as a participant!</p>"
        "<p>Please log in to your learning dashboard to access the course materials "
        "and start your learning journey.</p>"
    )
    return _SHELL.format(title="Course Registration Confirmation", body=body, support=SUPPORT_EMAIL)


def _format_amount(amount: float) -> str:
    if float(amount).is_integer():
        return str(int(amount))
    return f"{amount:.2f}"


def payment_success_email(name: str, amount: float, order_id: str, payment_id: str) -> str:
    """amount is in major units (rupees); callers convert from paise first."""
    body = (
        f"<p>Dear {escape(name)},</p>"
        f"<p>We have received a payment of <strong>&#8377;{_format_amount(amount)}</strong>.</p>"
        f"<p>Your Payment ID is <b>{escape(payment_id)}</b></p>"
        f"<p>Your Order ID is <b>{escape(order_id)}</b></p>"
    )
    return _SHELL.format(title="Course Payment Confirmation", body=body, support=SUPPORT_EMAIL)
