"""
Tests for the component registry.

Tests for:
- Registration and validation
- Batch registration (all-or-nothing)
- Ordered, filtered listing
"""

import pytest

from fragmently.errors import InvalidArgumentError
from fragmently.registry import ComponentRegistry
from fragmently.types import ComponentFilter, ComponentMeta, RegistryEntry


async def _loader():
    return "component"


# =============================================================================
# Registration
# =============================================================================


class TestRegistration:
    """Tests for register / unregister / lookup."""

    def test_register_and_get(self):
        registry = ComponentRegistry()
        entry = registry.register("hero", _loader, {"category": "marketing"})

        assert registry.get("hero") is entry
        assert registry.has("hero")
        assert "hero" in registry
        assert entry.meta.category == "marketing"

    def test_get_missing_returns_none(self):
        assert ComponentRegistry().get("missing") is None

    @pytest.mark.parametrize("bad_id", ["", None, 42])
    def test_rejects_invalid_id(self, bad_id):
        with pytest.raises(InvalidArgumentError):
            ComponentRegistry().register(bad_id, _loader)

    def test_rejects_non_callable_loader(self):
        with pytest.raises(InvalidArgumentError):
            ComponentRegistry().register("hero", "not callable")

    def test_reregister_replaces_entry(self):
        registry = ComponentRegistry()
        registry.register("hero", _loader, {"category": "a"})

        async def other():
            return "other"

        registry.register("hero", other, {"tags": ["b"]})

        entry = registry.get("hero")
        assert entry.loader is other
        # Replaced, not merged
        assert entry.meta.category is None
        assert entry.meta.tags == ("b",)
        assert len(registry) == 1

    def test_unregister(self):
        registry = ComponentRegistry()
        registry.register("hero", _loader)

        assert registry.unregister("hero") is True
        assert registry.get("hero") is None

    def test_unregister_missing_is_idempotent(self):
        registry = ComponentRegistry()
        assert registry.unregister("missing") is False
        assert registry.unregister("missing") is False

    def test_meta_extra_fields(self):
        registry = ComponentRegistry()
        entry = registry.register("hero", _loader, {"category": "x", "owner": "growth"})

        assert entry.meta.extra == {"owner": "growth"}
        assert entry.meta.get("owner") == "growth"
        assert entry.meta.get("category") == "x"

    def test_accepts_component_meta(self):
        meta = ComponentMeta(category="form", tags=("interactive",))
        entry = ComponentRegistry().register("signup", _loader, meta)
        assert entry.meta is meta


class TestRegisterMany:
    """Tests for batch registration."""

    def test_registers_all(self):
        registry = ComponentRegistry()
        registry.register_many(
            [
                RegistryEntry("a", _loader),
                {"id": "b", "loader": _loader, "meta": {"category": "form"}},
            ]
        )
        assert registry.ids() == ["a", "b"]
        assert registry.get("b").meta.category == "form"

    def test_malformed_entry_fails_whole_batch(self):
        registry = ComponentRegistry()
        registry.register("existing", _loader)

        with pytest.raises(InvalidArgumentError):
            registry.register_many(
                [
                    RegistryEntry("a", _loader),
                    {"id": "", "loader": _loader},
                    RegistryEntry("c", _loader),
                ]
            )

        assert registry.ids() == ["existing"]

    def test_rejects_unknown_item_type(self):
        with pytest.raises(InvalidArgumentError):
            ComponentRegistry().register_many(["hero"])


# =============================================================================
# Listing
# =============================================================================


@pytest.fixture
def populated():
    registry = ComponentRegistry()
    registry.register("signup", _loader, {"category": "form", "tags": ["interactive", "auth"]})
    registry.register("search", _loader, {"category": "form", "tags": ["readonly"]})
    registry.register("hero", _loader, {"category": "marketing", "tags": ["interactive"]})
    registry.register("footer", _loader)
    return registry


class TestListing:
    """Tests for ordered, filtered listing."""

    def test_list_in_registration_order(self, populated):
        assert [e.id for e in populated.list()] == ["signup", "search", "hero", "footer"]

    def test_reregister_keeps_position(self, populated):
        populated.register("search", _loader)
        assert [e.id for e in populated.list()] == ["signup", "search", "hero", "footer"]

    def test_unregister_then_register_moves_to_end(self, populated):
        populated.unregister("signup")
        populated.register("signup", _loader)
        assert [e.id for e in populated.list()] == ["search", "hero", "footer", "signup"]

    def test_filter_by_category(self, populated):
        assert [e.id for e in populated.list(category="form")] == ["signup", "search"]

    def test_filter_by_single_tag(self, populated):
        assert [e.id for e in populated.list(tag="interactive")] == ["signup", "hero"]

    def test_category_and_tags_are_conjunctive(self, populated):
        result = populated.list({"category": "form", "tags": ["interactive"]})
        assert [e.id for e in result] == ["signup"]

    def test_missing_one_required_tag_excludes(self, populated):
        assert populated.list(category="form", tags=["interactive", "readonly"]) == []

    def test_predicate(self, populated):
        result = populated.list(ComponentFilter(predicate=lambda e: e.id.startswith("s")))
        assert [e.id for e in result] == ["signup", "search"]

    def test_all_criteria_must_pass(self, populated):
        result = populated.list(
            category="form",
            tag="auth",
            tags=["interactive"],
            predicate=lambda e: e.id == "search",
        )
        assert result == []

    def test_no_match_returns_empty(self, populated):
        assert populated.list(category="email") == []

    def test_string_tags_criterion_is_one_tag(self):
        registry = ComponentRegistry()
        registry.register("a", _loader, {"tags": "interactive"})
        registry.register("b", _loader, {"tags": ["interactive"]})

        assert [e.id for e in registry.list(tags="interactive")] == ["a", "b"]
        assert ComponentFilter(tags="interactive").tags == ("interactive",)

    def test_keyword_criteria_narrow_a_filter(self, populated):
        result = populated.list(ComponentFilter(category="form"), tag="auth")
        assert [e.id for e in result] == ["signup"]

    def test_keyword_criteria_override_filter_fields(self, populated):
        result = populated.list(ComponentFilter(category="form"), category="marketing")
        assert [e.id for e in result] == ["hero"]

    def test_unknown_criterion_rejected(self, populated):
        with pytest.raises(InvalidArgumentError):
            populated.list({"categry": "form"})

        with pytest.raises(InvalidArgumentError):
            populated.list(ComponentFilter(), colour="red")

    def test_invalid_filter_type_rejected(self, populated):
        with pytest.raises(InvalidArgumentError):
            populated.list("form")
