# invitelib/notifier.py
"""
Apprise notifier - HTML email (or whatever Apprise routes to) for admins.

Env:
  APPRISE_URL            Apprise /notify endpoint (required)
  APPRISE_TAG            optional tag to route on
  EMAIL_TEMPLATE_PATH    optional Jinja2 HTML template; embedded one otherwise
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Optional

import requests
from jinja2 import Environment, FileSystemLoader, Template, TemplateError, select_autoescape

from invitelib.config import DEFAULT_TIMEOUT_SECONDS, env_str
from invitelib.errors import ConfigError, NotificationError

log = logging.getLogger(__name__)

HEADER_INFO = "#4A154B"     # Slack aubergine
HEADER_FAILURE = "#E01E5A"

EMBEDDED_TEMPLATE = """<!DOCTYPE html>
<html>
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>{{ title }}</title>
</head>
<body style="font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, Helvetica, Arial, sans-serif; line-height: 1.6; color: #333333; margin: 0; padding: 0; background-color: #f4f4f4;">
    <div style="max-width: 600px; margin: 20px auto; background-color: #ffffff; border-radius: 8px;">
        <div style="background-color: {{ header_color }}; color: #ffffff; padding: 20px; border-radius: 8px 8px 0 0; text-align: center;">
            <h1 style="margin: 0; font-size: 24px; font-weight: 600;">Slack Invite Manager</h1>
        </div>
        <div style="padding: 30px; font-size: 16px;">
            {{ body }}
        </div>
        <div style="padding: 20px; text-align: center; font-size: 14px; color: #666666; border-top: 1px solid #eeeeee;">
            <p style="margin: 0;">This is an automated message from the Slack Invite Manager system.</p>
        </div>
    </div>
</body>
</html>
"""


def notification_type(subject: str) -> str:
    s = (subject or "").lower()
    if "error" in s or "failed" in s:
        return "failure"
    return "info"


class AppriseNotifier:
    def __init__(
        self,
        apprise_url: str = "",
        tag: str = "",
        template_path: str = "",
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        session: Optional[requests.Session] = None,
    ):
        self.apprise_url = apprise_url or env_str("APPRISE_URL")
        if not self.apprise_url:
            raise ConfigError(["APPRISE_URL"])
        self.tag = tag or env_str("APPRISE_TAG")
        self.template_path = template_path or env_str("EMAIL_TEMPLATE_PATH")
        self.timeout = timeout
        self.session = session or requests.Session()

    def _template(self) -> Template:
        if self.template_path:
            p = Path(self.template_path)
            env = Environment(loader=FileSystemLoader(str(p.parent)), autoescape=select_autoescape(default=True))
            return env.get_template(p.name)
        return Environment(autoescape=True).from_string(EMBEDDED_TEMPLATE)

    def render(self, title: str, body: str, kind: str) -> str:
        header = HEADER_FAILURE if kind == "failure" else HEADER_INFO
        try:
            return self._template().render(title=title, header_color=header, body=body)
        except TemplateError as e:
            raise NotificationError(f"failed to render email template: {e}") from e

    def send(self, subject: str, body: str) -> None:
        kind = notification_type(subject)
        payload: Dict[str, Any] = {
            "title": subject,
            "body": self.render(subject, body, kind),
            "type": kind,
            "format": "html",
        }
        if self.tag:
            payload["tag"] = self.tag

        try:
            r = self.session.post(self.apprise_url, json=payload, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            raise NotificationError(f"failed to send notification: {e}") from e

        if r.status_code < 200 or r.status_code >= 300:
            raise NotificationError(f"apprise returned non-success status: {r.status_code}")
        log.info("notification sent: %s (%s)", subject, kind)
