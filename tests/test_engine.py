"""
Tests for the rendering engine boundary and the Jinja engine.
"""

from unittest.mock import patch

import pytest
from jinja2 import DictLoader, Environment

from fragmently.config import RuntimeSettings
from fragmently.engine import CONTEXT_PROP, EngineBridge, JinjaEngine, RenderEngine
from fragmently.errors import EngineError, RenderError

# =============================================================================
# EngineBridge Tests
# =============================================================================


class TestEngineBridge:
    """Tests for EngineBridge."""

    @pytest.mark.asyncio
    async def test_injects_context_as_reserved_prop(self, engine):
        bridge = EngineBridge(engine)

        await bridge.render("hero", props={"title": "Hi"}, context={"channel": "og"})

        call = engine.calls[0]
        assert call["props"] == {"title": "Hi", CONTEXT_PROP: {"channel": "og"}}
        assert call["slots"] == {}

    @pytest.mark.asyncio
    async def test_does_not_mutate_caller_props(self, engine):
        props = {"title": "Hi"}
        await EngineBridge(engine).render("hero", props=props, context={"channel": "web"})
        assert props == {"title": "Hi"}

    @pytest.mark.asyncio
    async def test_factory_called_lazily_once(self, engine):
        created = []

        def factory():
            created.append(1)
            return engine

        bridge = EngineBridge(engine_factory=factory)
        assert created == []

        await bridge.render("a")
        await bridge.render("b")

        assert created == [1]

    @pytest.mark.asyncio
    async def test_dispose_recreates_owned_engine(self, engine):
        created = []

        def factory():
            created.append(1)
            return engine

        bridge = EngineBridge(engine_factory=factory)
        await bridge.render("a")
        bridge.dispose()
        await bridge.render("b")

        assert len(created) == 2

    def test_dispose_keeps_caller_engine(self, engine):
        bridge = EngineBridge(engine)
        bridge.dispose()
        assert bridge.engine is engine

    def test_default_engine_is_jinja(self):
        bridge = EngineBridge(settings=RuntimeSettings(autoescape=False))
        assert isinstance(bridge.engine, JinjaEngine)
        assert isinstance(bridge.engine, RenderEngine)


# =============================================================================
# JinjaEngine Tests
# =============================================================================


class TestJinjaEngine:
    """Tests for JinjaEngine."""

    @pytest.mark.asyncio
    async def test_renders_source_string_with_props(self):
        html = await JinjaEngine().render("<h1>{{ title }}</h1>", props={"title": "Hello"})
        assert html == "<h1>Hello</h1>"

    @pytest.mark.asyncio
    async def test_autoescapes_props(self):
        html = await JinjaEngine().render("<p>{{ text }}</p>", props={"text": "<b>x</b>"})
        assert html == "<p>&lt;b&gt;x&lt;/b&gt;</p>"

    @pytest.mark.asyncio
    async def test_context_available_to_template(self):
        html = await JinjaEngine().render(
            "{{ __context.channel }}/{{ __context.locale }}",
            props={CONTEXT_PROP: {"channel": "email", "locale": "de"}},
        )
        assert html == "email/de"

    @pytest.mark.asyncio
    async def test_string_slots_are_trusted_markup(self):
        html = await JinjaEngine().render(
            "<section>{{ slots.default }}</section>",
            slots={"default": "<p>inner</p>"},
        )
        assert html == "<section><p>inner</p></section>"

    @pytest.mark.asyncio
    async def test_template_slots_rendered_with_context(self):
        engine = JinjaEngine()
        slot = engine.compile("<span>{{ __context.channel }}</span>")

        html = await engine.render(
            "<div>{{ slots.badge }}</div>",
            props={CONTEXT_PROP: {"channel": "widget"}},
            slots={"badge": slot},
        )
        assert html == "<div><span>widget</span></div>"

    @pytest.mark.asyncio
    async def test_slots_variable_not_shadowed_by_prop(self):
        html = await JinjaEngine().render(
            "<main>{{ slots.body }}</main>",
            props={"slots": "ignored"},
            slots={"body": "<p>kept</p>"},
        )
        assert html == "<main><p>kept</p></main>"

    @pytest.mark.asyncio
    async def test_source_string_compiled_once(self):
        engine = JinjaEngine()
        with patch.object(
            engine.environment, "from_string", wraps=engine.environment.from_string
        ) as from_string:
            assert await engine.render("<b>{{ n }}</b>", props={"n": 1}) == "<b>1</b>"
            assert await engine.render("<b>{{ n }}</b>", props={"n": 2}) == "<b>2</b>"

        assert from_string.call_count == 1

    @pytest.mark.asyncio
    async def test_renders_sync_environment_templates(self):
        template = Environment().from_string("{{ n * 2 }}")
        assert await JinjaEngine().render(template, props={"n": 21}) == "42"

    @pytest.mark.asyncio
    async def test_load_from_loader(self):
        env = Environment(
            loader=DictLoader({"card.html": "<article>{{ title }}</article>"}),
            enable_async=True,
        )
        engine = JinjaEngine(env)

        html = await engine.render(engine.load("card.html"), props={"title": "OG"})
        assert html == "<article>OG</article>"

    def test_load_missing_template(self):
        engine = JinjaEngine(Environment(loader=DictLoader({})))
        with pytest.raises(EngineError, match="not found"):
            engine.load("missing.html")

    def test_load_without_loader(self):
        with pytest.raises(EngineError):
            JinjaEngine().load("card.html")

    def test_load_from_template_dir(self, tmp_path):
        (tmp_path / "hero.html").write_text("<h1>{{ title }}</h1>")
        engine = JinjaEngine.from_settings(RuntimeSettings(template_dir=str(tmp_path)))
        assert engine.load("hero.html").name == "hero.html"

    @pytest.mark.asyncio
    async def test_invalid_component_raises_engine_error(self):
        with pytest.raises(EngineError, match="Invalid component"):
            await JinjaEngine().render(12345)

    def test_syntax_error_raises_engine_error(self):
        with pytest.raises(EngineError):
            JinjaEngine().compile("{% if %}")

    @pytest.mark.asyncio
    async def test_runtime_fault_raises_engine_error(self):
        with pytest.raises(EngineError) as exc_info:
            await JinjaEngine().render("{{ 1 / zero }}", props={"zero": 0})

        assert isinstance(exc_info.value, RenderError)
        assert isinstance(exc_info.value.__cause__, ZeroDivisionError)
