"""
Email preset.

Configures the runtime for email template rendering:
- Sets channel to "email"
- Registers an ``email`` service for rendering and layout wrapping

Usage:
    preset = email_preset(provider="sendgrid")
    runtime = create_runtime(preset.to_runtime_config())
    runtime.register_component("emails.welcome", load_welcome)

    email = await runtime.get_service("email")
    message = await email.render_email("emails.welcome", {"name": "Ada"})
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from markupsafe import escape

from fragmently.types import Channel, ServiceDefinition

from .base import PresetConfig

if TYPE_CHECKING:
    from fragmently.runtime import FragmentRuntime

_TITLE_RE = re.compile(r"<title>([^<]+)</title>", re.IGNORECASE)

# CSS properties that render consistently across major email clients
EMAIL_SAFE_STYLES = (
    "background-color",
    "border",
    "border-radius",
    "color",
    "font-family",
    "font-size",
    "font-weight",
    "height",
    "line-height",
    "margin",
    "padding",
    "text-align",
    "text-decoration",
    "vertical-align",
    "width",
)

_LAYOUT = """<!DOCTYPE html PUBLIC "-//W3C//DTD XHTML 1.0 Transitional//EN" "http://www.w3.org/TR/xhtml1/DTD/xhtml1-transitional.dtd">
<html xmlns="http://www.w3.org/1999/xhtml">
<head>
  <meta http-equiv="Content-Type" content="text/html; charset=UTF-8" />
  <meta name="viewport" content="width=device-width, initial-scale=1.0" />
  <title>{title}</title>
  <!--[if mso]>
  <style type="text/css">
    table {{ border-collapse: collapse; }}
    .fallback-font {{ font-family: Arial, sans-serif; }}
  </style>
  <![endif]-->
</head>
<body style="margin: 0; padding: 0; background-color: {background};">
  {preheader}
  <table role="presentation" cellpadding="0" cellspacing="0" width="100%" style="background-color: {background};">
    <tr>
      <td align="center">
        <table role="presentation" cellpadding="0" cellspacing="0" width="600" style="max-width: 600px;">
          <tr>
            <td>
              {content}
            </td>
          </tr>
        </table>
      </td>
    </tr>
  </table>
</body>
</html>"""


@dataclass(frozen=True)
class EmailMessage:
    """Rendered email body plus the subject found in its <title>."""

    html: str
    subject: str | None = None


class EmailService:
    """Email helpers bound to a runtime."""

    def __init__(self, runtime: FragmentRuntime):
        self._runtime = runtime

    async def render_email(
        self,
        component_id: str,
        props: dict[str, Any] | None = None,
    ) -> EmailMessage:
        """Render an email template by id and extract its subject."""
        html = await self._runtime.render_to_string(
            component_id,
            props=props,
            context={"channel": Channel.EMAIL.value},
        )
        match = _TITLE_RE.search(html)
        return EmailMessage(html=html, subject=match.group(1).strip() if match else None)

    def safe_styles(self) -> list[str]:
        return list(EMAIL_SAFE_STYLES)

    def wrap_in_email_layout(
        self,
        content: str,
        *,
        title: str = "",
        preheader: str = "",
        background_color: str = "#f4f4f4",
    ) -> str:
        """Wrap rendered markup in an email-safe XHTML table layout."""
        preheader_html = (
            f'<div style="display: none; max-height: 0; overflow: hidden;">{escape(preheader)}</div>'
            if preheader
            else ""
        )
        return _LAYOUT.format(
            title=escape(title),
            background=escape(background_color),
            preheader=preheader_html,
            content=content,
        )


def email_preset(
    *,
    locale: str = "en",
    provider: str = "generic",
    inline_styles: bool = True,
) -> PresetConfig:
    """
    Build the email preset.

    Args:
        locale: Default locale
        provider: Email provider (generic, sendgrid, mailgun, ses, postmark)
        inline_styles: Whether components should inline their CSS
    """
    return PresetConfig(
        base_context={
            "locale": locale,
            "channel": Channel.EMAIL.value,
            "provider": provider,
            "inline_styles": inline_styles,
        },
        services=[ServiceDefinition(name="email", factory=EmailService)],
    )
