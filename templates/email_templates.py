"""
Email bodies for every notification the site sends.

Each renderer takes the notification payload and returns
``(subject, text_body, html_body)``.
"""
import os
from html import escape

SITE_NAME = os.environ.get("SITE_NAME", "Buddha CEO Quantum Foundation")
SITE_URL = os.environ.get("SITE_URL", "https://buddhaceo.org")


def _layout(title: str, body_html: str) -> str:
    # Table based layout renders the same in Gmail, Yahoo and Outlook
    return f"""
<!DOCTYPE html>
<html>
  <head>
    <meta http-equiv="Content-Type" content="text/html; charset=utf-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>{escape(title)}</title>
  </head>
  <body style="margin:0; padding:0; background-color:#f5f7fa;">
    <table role="presentation" cellpadding="0" cellspacing="0" border="0" width="100%" style="background-color:#f5f7fa;">
      <tr>
        <td align="center" style="padding:24px 12px;">
          <table role="presentation" cellpadding="0" cellspacing="0" border="0" width="560" style="width:560px; max-width:560px; background-color:#ffffff; border-radius:16px; border:1px solid #e5e7eb;">
            <tr>
              <td align="center" style="background-color:#4f46e5; padding:24px 16px; border-top-left-radius:16px; border-top-right-radius:16px; font-family:Arial, sans-serif; font-size:22px; color:#ffffff; font-weight:700;">
                {escape(title)}
              </td>
            </tr>
            <tr>
              <td style="padding:28px 28px 8px 28px; font-family:Arial, sans-serif; font-size:15px; color:#374151; line-height:1.6;">
                {body_html}
              </td>
            </tr>
            <tr>
              <td align="center" style="padding:16px 28px 28px 28px; font-family:Arial, sans-serif; font-size:12px; color:#6b7280;">
                {escape(SITE_NAME)} &middot; <a href="{SITE_URL}" style="color:#6b7280;">{SITE_URL}</a>
              </td>
            </tr>
          </table>
        </td>
      </tr>
    </table>
  </body>
</html>
"""


def render_verification_code(data: dict):
    code = data["code"]
    purpose_label = data.get("purpose_label", "Verification")
    minutes = data.get("expires_in_minutes", 10)
    subject = f"Your verification code for {purpose_label}"
    text = (
        f"Your verification code for {purpose_label} is {code}. "
        f"It is valid for {minutes} minutes. "
        "If you did not request this, please ignore this email."
    )
    html = _layout("Verify your email", f"""
        <p>Use the one-time verification code below to complete your {escape(purpose_label.lower())}.
        This code is valid for <strong>{minutes} minutes</strong>.</p>
        <p style="text-align:center; font-size:36px; letter-spacing:8px; color:#4f46e5; font-weight:700;">{escape(code)}</p>
        <p style="font-size:13px; color:#6b7280;">If you did not request this code, you can safely ignore this email.</p>
    """)
    return subject, text, html


def render_event_registration_confirmation(data: dict):
    name = data.get("name", "")
    title = data.get("event_title", "")
    where = "Online" if data.get("is_online") else (data.get("event_location") or "To be announced")
    subject = f"Registration confirmed: {title}"
    text = (
        f"Dear {name},\n\nYou are registered for {title}.\n"
        f"Date: {data.get('event_date', '')}\nTime: {data.get('event_time', '')}\nLocation: {where}\n\n"
        f"We look forward to meditating with you.\n{SITE_NAME}"
    )
    html = _layout("Registration Confirmed", f"""
        <p>Dear {escape(name)},</p>
        <p>You are registered for <strong>{escape(title)}</strong>.</p>
        <table role="presentation" cellpadding="4" cellspacing="0" border="0">
          <tr><td><strong>Date</strong></td><td>{escape(str(data.get('event_date', '')))}</td></tr>
          <tr><td><strong>Time</strong></td><td>{escape(str(data.get('event_time', '')))}</td></tr>
          <tr><td><strong>Location</strong></td><td>{escape(where)}</td></tr>
        </table>
        <p>We look forward to meditating with you.</p>
    """)
    return subject, text, html


def render_application_confirmation(data: dict):
    name = data.get("name", "")
    program = data.get("program", "our program")
    reference = data.get("reference_number")
    subject = f"We received your application: {program}"
    reference_line = f"Reference number: {reference}\n" if reference else ""
    text = (
        f"Dear {name},\n\nThank you for applying for {program}. "
        "Our team will review your application within 5-7 business days "
        f"and contact you with the next steps.\n{reference_line}\n{SITE_NAME}"
    )
    reference_html = f"<p><strong>Reference number:</strong> {escape(reference)}</p>" if reference else ""
    html = _layout("Application Received", f"""
        <p>Dear {escape(name)},</p>
        <p>Thank you for applying for <strong>{escape(program)}</strong>. Our team will review your
        application within 5-7 business days and contact you with the next steps.</p>
        {reference_html}
    """)
    return subject, text, html


def render_application_approval(data: dict):
    name = data.get("name", "")
    program = data.get("program", "our program")
    subject = f"Congratulations! Your application for {program} was approved"
    text = (
        f"Dear {name},\n\nWe are delighted to let you know that your application for {program} "
        "has been approved. A coordinator will reach out shortly with onboarding details.\n\n"
        f"{SITE_NAME}"
    )
    html = _layout("Application Approved", f"""
        <p>Dear {escape(name)},</p>
        <p>We are delighted to let you know that your application for <strong>{escape(program)}</strong>
        has been approved. A coordinator will reach out shortly with onboarding details.</p>
    """)
    return subject, text, html
