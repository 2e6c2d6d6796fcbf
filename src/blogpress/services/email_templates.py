"""HTML bodies for outbound emails."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from html import escape

from blogpress.models.otp import OtpPurpose

_OTP_SUBJECTS: dict[OtpPurpose, str] = {
    OtpPurpose.SUBMISSION: "Your OTP for Blog Submission",
    OtpPurpose.SUBSCRIBE: "Your OTP for Blog Subscription",
}

_OTP_PURPOSE_TEXT: dict[OtpPurpose, str] = {
    OtpPurpose.SUBMISSION: "blog submission",
    OtpPurpose.SUBSCRIBE: "blog subscription",
}


@dataclass(frozen=True)
class DigestEntry:
    """Post summary rendered in the subscriber digest."""

    title: str
    slug: str
    excerpt: str | None


def _page(body: str) -> str:
    return (
        "<html>\n"
        '<body style="font-family: Arial, sans-serif; padding: 20px;">\n'
        f"{body}\n"
        "</body>\n"
        "</html>\n"
    )


def otp_subject(purpose: OtpPurpose) -> str:
    return _OTP_SUBJECTS[purpose]


def otp_body(code: str, purpose: OtpPurpose, expiry_minutes: int) -> str:
    return _page(
        "<h2>OTP Verification</h2>\n"
        f"<p>Your OTP for {_OTP_PURPOSE_TEXT[purpose]} is:</p>\n"
        f'<h1 style="color: #4A90D9; letter-spacing: 8px; font-size: 36px;">{code}</h1>\n'
        f"<p>This OTP is valid for <strong>{expiry_minutes} minutes</strong>.</p>\n"
        '<p style="color: #888; font-size: 12px;">'
        "If you did not request this, please ignore this email.</p>"
    )


def submission_received(title: str, reference_id: str) -> tuple[str, str]:
    return "We received your blog submission", _page(
        "<h2>Blog Submitted!</h2>\n"
        f"<p>Thanks! Your blog <strong>\"{escape(title)}\"</strong> has been submitted "
        "and is awaiting admin approval.</p>\n"
        f"<p>Reference ID: <strong>{escape(reference_id)}</strong></p>\n"
        "<p>You will receive an email once it has been reviewed.</p>"
    )


def approval(title: str, link: str) -> tuple[str, str]:
    return "Your blog is now live!", _page(
        "<h2>Congratulations!</h2>\n"
        f"<p>Your blog <strong>\"{escape(title)}\"</strong> has been approved and published.</p>\n"
        f'<p><a href="{escape(link)}" style="color: #4A90D9;">View your blog</a></p>\n'
        "<p>Thank you for your contribution!</p>"
    )


def rejection(title: str, reason: str) -> tuple[str, str]:
    return "Update on your blog submission", _page(
        "<h2>Blog Submission Update</h2>\n"
        f"<p>We've reviewed your blog <strong>\"{escape(title)}\"</strong>.</p>\n"
        "<p>Unfortunately, it was not approved for the following reason:</p>\n"
        '<blockquote style="border-left: 4px solid #E74C3C; padding: 10px; color: #555;">'
        f"{escape(reason)}</blockquote>\n"
        "<p>You are welcome to update and resubmit your blog.</p>"
    )


def new_posts_digest(
    subscriber_name: str | None,
    entries: Sequence[DigestEntry],
    frontend_url: str,
) -> tuple[str, str]:
    rows = []
    base = frontend_url.rstrip("/")
    for entry in entries:
        link = f"{base}/blogs/{entry.slug}"
        rows.append(
            "<tr><td style=\"padding: 16px 20px; border-bottom: 1px solid #f0f0f0;\">"
            f"<h3 style=\"margin: 0 0 6px 0;\">{escape(entry.title)}</h3>"
            f"<p style=\"margin: 0 0 10px 0; color: #666;\">{escape(entry.excerpt or '')}</p>"
            f"<a href=\"{escape(link)}\">Read Now</a>"
            "</td></tr>"
        )
    greeting = subscriber_name.strip() if subscriber_name and subscriber_name.strip() else "there"
    return "New blogs published on BlogPress!", _page(
        f"<p>Hey {escape(greeting)},</p>\n"
        f"<p>We have {len(entries)} new blog(s) published recently:</p>\n"
        f"<table width=\"100%\">{''.join(rows)}</table>\n"
        '<p style="color: #999; font-size: 12px;">'
        "You're receiving this because you subscribed to BlogPress.</p>"
    )
