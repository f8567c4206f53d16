"""
Static email generation example.

Renders email templates to files with the email preset and the CLI
renderer, ready to upload to a mail provider.

Run:
    python examples/static_emails.py

The same render from a shell:
    fragmently examples.static_emails:build_runtime emails.welcome welcome.html --prop name=Ada
"""

import asyncio
import logging

from fragmently import create_runtime
from fragmently.adapters import BatchItem, CLIRenderer
from fragmently.presets import email_preset

WELCOME = """<html>
<head><title>Welcome, {{ name }}</title></head>
<body><h1>Hi {{ name }}</h1><p>Sent via {{ __context.provider }}.</p></body>
</html>"""

RESET = """<html>
<head><title>Reset your password</title></head>
<body><a href="{{ link }}">Reset password</a></body>
</html>"""


def build_runtime():
    runtime = create_runtime(email_preset(provider="sendgrid").to_runtime_config())
    runtime.register_component("emails.welcome", lambda: WELCOME, {"category": "email"})
    runtime.register_component("emails.reset", lambda: RESET, {"category": "email"})
    return runtime


async def main():
    runtime = build_runtime()

    # Subject extraction and layout wrapping
    email = await runtime.get_service("email")
    message = await email.render_email("emails.welcome", {"name": "Ada"})
    print(f"Subject: {message.subject}")

    wrapped = email.wrap_in_email_layout(message.html, title=message.subject or "")
    print(f"Wrapped layout: {len(wrapped)} bytes")

    # Batch render to ./dist
    renderer = CLIRenderer(runtime, output_dir="dist", verbose=True)
    results = await renderer.batch_render(
        [
            BatchItem("emails.welcome", "welcome.html", {"name": "Ada"}),
            BatchItem("emails.reset", "reset.html", {"link": "https://example.com/r/abc"}),
        ]
    )
    for result in results:
        print(f"{result.component_id} -> {result.output_path}")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    asyncio.run(main())
