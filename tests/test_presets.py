"""
Tests for runtime presets.
"""

import pytest

from fragmently import FragmentRuntime, RegistryEntry
from fragmently.errors import NotFoundError
from fragmently.presets import (
    CMSService,
    EmailMessage,
    EmailService,
    HTMXService,
    cms_preset,
    email_preset,
    htmx_preset,
)


def _runtime(preset, settings):
    return FragmentRuntime(preset.to_runtime_config(), settings=settings)


# =============================================================================
# Email
# =============================================================================


class TestEmailPreset:
    """Tests for email_preset."""

    def test_base_context(self):
        preset = email_preset(locale="de", provider="sendgrid")

        assert preset.base_context == {
            "locale": "de",
            "channel": "email",
            "provider": "sendgrid",
            "inline_styles": True,
        }
        assert [s.name for s in preset.services] == ["email"]

    @pytest.mark.asyncio
    async def test_render_email_extracts_subject(self, settings):
        runtime = _runtime(email_preset(), settings)
        runtime.register_component(
            "emails.welcome",
            lambda: "<html><head><title>Welcome {{ name }}</title></head>"
            "<body>{{ __context.channel }}</body></html>",
        )

        email = await runtime.get_service("email")
        message = await email.render_email("emails.welcome", {"name": "Ada"})

        assert isinstance(email, EmailService)
        assert isinstance(message, EmailMessage)
        assert message.subject == "Welcome Ada"
        assert set(vars(message)) == {"html", "subject"}
        assert "<body>email</body>" in message.html

    @pytest.mark.asyncio
    async def test_render_email_without_title(self, settings):
        runtime = _runtime(email_preset(), settings)
        runtime.register_component("emails.plain", lambda: "<p>hi</p>")

        message = await (await runtime.get_service("email")).render_email("emails.plain")

        assert message.subject is None

    @pytest.mark.asyncio
    async def test_wrap_in_email_layout(self, settings):
        email = await _runtime(email_preset(), settings).get_service("email")

        html = email.wrap_in_email_layout(
            "<p>body</p>", title="Hi & bye", preheader="Preview", background_color="#fff"
        )

        assert html.startswith("<!DOCTYPE html")
        assert "<title>Hi &amp; bye</title>" in html
        assert "Preview</div>" in html
        assert "background-color: #fff;" in html
        assert "<p>body</p>" in html
        assert "table { border-collapse: collapse; }" in html

    @pytest.mark.asyncio
    async def test_layout_omits_empty_preheader(self, settings):
        email = await _runtime(email_preset(), settings).get_service("email")
        assert "display: none" not in email.wrap_in_email_layout("<p/>")

    @pytest.mark.asyncio
    async def test_safe_styles(self, settings):
        email = await _runtime(email_preset(), settings).get_service("email")
        assert "font-family" in email.safe_styles()


# =============================================================================
# CMS
# =============================================================================


@pytest.fixture
def cms_runtime(settings):
    preset = cms_preset(
        provider="contentful",
        blocks=[
            RegistryEntry("blocks.hero", lambda: "<h1>{{ title }}</h1>"),
            RegistryEntry("blocks.text", lambda: "<p data-c='{{ __context.channel }}'>{{ body }}</p>"),
        ],
    )
    runtime = FragmentRuntime(preset.to_runtime_config(), settings=settings)
    runtime.register_component("layouts.page", lambda: "<main>{{ content }}</main>")
    return runtime


class TestCMSPreset:
    """Tests for cms_preset."""

    def test_base_context(self):
        assert cms_preset(provider="sanity").base_context == {
            "locale": "en",
            "channel": "web",
            "provider": "sanity",
            "is_headless": True,
        }

    @pytest.mark.asyncio
    async def test_render_block_adds_prefix(self, cms_runtime):
        cms = await cms_runtime.get_service("cms")

        assert isinstance(cms, CMSService)
        assert await cms.render_block("hero", {"title": "T"}) == "<h1>T</h1>"
        assert await cms.render_block("blocks.hero", {"title": "T"}) == "<h1>T</h1>"

    @pytest.mark.asyncio
    async def test_render_block_channel_override(self, cms_runtime):
        cms = await cms_runtime.get_service("cms")
        html = await cms.render_block("text", {"body": "b"}, channel="email")
        assert html == "<p data-c='email'>b</p>"

    @pytest.mark.asyncio
    async def test_render_blocks_keeps_order(self, cms_runtime):
        cms = await cms_runtime.get_service("cms")

        html = await cms.render_blocks(
            [
                {"type": "hero", "data": {"title": "1"}},
                {"type": "text", "data": {"body": "2"}},
                {"type": "hero", "data": {"title": "3"}},
            ]
        )

        assert html == "<h1>1</h1>\n<p data-c='web'>2</p>\n<h1>3</h1>"

    @pytest.mark.asyncio
    async def test_render_page_with_wrapper(self, cms_runtime):
        cms = await cms_runtime.get_service("cms")

        html = await cms.render_page(
            [{"type": "hero", "data": {"title": "T"}}],
            wrapper={"component_id": "layouts.page"},
        )

        assert html == "<main><h1>T</h1></main>"

    @pytest.mark.asyncio
    async def test_render_page_without_wrapper(self, cms_runtime):
        cms = await cms_runtime.get_service("cms")
        assert await cms.render_page([{"type": "hero", "data": {"title": "T"}}]) == "<h1>T</h1>"

    @pytest.mark.asyncio
    async def test_has_and_list_blocks(self, cms_runtime):
        cms = await cms_runtime.get_service("cms")

        assert cms.has_block("hero")
        assert not cms.has_block("gallery")
        assert cms.list_blocks() == ["hero", "text"]

    @pytest.mark.asyncio
    async def test_unknown_block_not_found(self, cms_runtime):
        cms = await cms_runtime.get_service("cms")
        with pytest.raises(NotFoundError):
            await cms.render_block("gallery")

    @pytest.mark.asyncio
    async def test_custom_block_prefix(self, settings):
        preset = cms_preset(block_prefix="cms/", blocks=[RegistryEntry("cms/quote", lambda: "q")])
        cms = await FragmentRuntime(preset.to_runtime_config(), settings=settings).get_service("cms")

        assert cms.block_id("quote") == "cms/quote"
        assert cms.list_blocks() == ["quote"]


# =============================================================================
# HTMX
# =============================================================================


class TestHTMXPreset:
    """Tests for htmx_preset."""

    def test_base_context(self):
        assert htmx_preset(locale="de").base_context == {
            "locale": "de",
            "channel": "web",
            "framework": "htmx",
            "htmx": True,
        }

    @pytest.mark.asyncio
    async def test_response_headers(self, settings):
        htmx = await _runtime(htmx_preset(), settings).get_service("htmx")

        assert isinstance(htmx, HTMXService)
        assert htmx.response_headers(
            retarget="#cart", reswap="outerHTML", trigger="updated", refresh=True,
            redirect="/done", push_url="/cart",
        ) == {
            "HX-Retarget": "#cart",
            "HX-Reswap": "outerHTML",
            "HX-Trigger": "updated",
            "HX-Refresh": "true",
            "HX-Redirect": "/done",
            "HX-Push-Url": "/cart",
        }
        assert htmx.response_headers() == {}

    def test_request_inspection_is_case_insensitive(self):
        htmx = HTMXService()
        headers = {"hx-request": "true", "HX-Trigger": "btn", "hx-target": "#main"}

        assert htmx.is_htmx_request(headers)
        assert not htmx.is_htmx_request({})
        assert htmx.trigger_info(headers) == {
            "id": "btn",
            "name": None,
            "target": "#main",
            "current_url": None,
        }
