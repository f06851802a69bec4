"""Tests for layzspa.registry: adapter lookup and signature selection."""

from __future__ import annotations

import pytest

from layzspa.codecs import AIRJET_CODEC, HYDROJET_CODEC
from layzspa.registry import (
    AIRJET,
    HYDROJET_PRO,
    MODEL_REGISTRY,
    AdapterDescriptor,
    AdapterRegistry,
    default_registry,
)

from .conftest import AIRJET_RAW, HYDROJET_RAW


def _always(raw):
    return True


class TestSelectByName:
    def test_exact_names(self):
        assert MODEL_REGISTRY.select_by_name("Airjet") is AIRJET
        assert MODEL_REGISTRY.select_by_name("Hydrojet_Pro") is HYDROJET_PRO

    def test_name_is_trimmed(self):
        assert MODEL_REGISTRY.select_by_name("  Hydrojet_Pro ") is HYDROJET_PRO

    def test_no_partial_or_case_insensitive_match(self):
        assert MODEL_REGISTRY.select_by_name("hydrojet_pro") is None
        assert MODEL_REGISTRY.select_by_name("Hydrojet") is None

    @pytest.mark.parametrize("name", [None, ""])
    def test_empty_name(self, name):
        assert MODEL_REGISTRY.select_by_name(name) is None


class TestSelectInitial:
    def test_falls_back_to_airjet(self):
        assert MODEL_REGISTRY.select_initial("Unknown spa").id == "Airjet"
        assert MODEL_REGISTRY.select_initial(None).id == "Airjet"

    def test_name_wins(self):
        assert MODEL_REGISTRY.select_initial("Hydrojet_Pro").id == "Hydrojet_Pro"

    def test_default_without_configured_id_is_first(self):
        registry = AdapterRegistry([HYDROJET_PRO, AIRJET])
        assert registry.default is HYDROJET_PRO


class TestSelectBySignature:
    def test_payload_shapes(self):
        assert MODEL_REGISTRY.select_by_signature(AIRJET_RAW) is AIRJET
        assert MODEL_REGISTRY.select_by_signature(HYDROJET_RAW) is HYDROJET_PRO

    def test_null_field_still_counts_as_present(self):
        assert MODEL_REGISTRY.select_by_signature({"Tset": None}) is HYDROJET_PRO

    def test_no_match(self):
        assert MODEL_REGISTRY.select_by_signature({"power": 1}) is None
        assert MODEL_REGISTRY.select_by_signature({}) is None

    def test_bad_payload_does_not_raise(self):
        assert MODEL_REGISTRY.select_by_signature(None) is None

    def test_ambiguous_payload_tie_goes_to_earliest(self):
        raw = {"temp_now": 30, "Tnow": 30}
        assert MODEL_REGISTRY.select_by_signature(raw) is AIRJET
        reversed_registry = AdapterRegistry([HYDROJET_PRO, AIRJET])
        assert reversed_registry.select_by_signature(raw) is HYDROJET_PRO

    def test_repeated_calls_are_stable(self):
        raw = {"temp_now": 30, "Tnow": 30}
        ids = {MODEL_REGISTRY.select_by_signature(raw).id for _ in range(20)}
        assert ids == {"Airjet"}

    def test_highest_priority_wins(self):
        low = AdapterDescriptor(id="low", codec=AIRJET_CODEC, signature=_always, priority=1)
        high = AdapterDescriptor(id="high", codec=HYDROJET_CODEC, signature=_always, priority=5)
        same = AdapterDescriptor(id="same", codec=AIRJET_CODEC, signature=_always, priority=5)
        registry = AdapterRegistry([low, high, same])
        assert registry.select_by_signature({}).id == "high"

    def test_descriptor_without_signature_never_matches(self):
        bare = AdapterDescriptor(id="bare", codec=AIRJET_CODEC, priority=100)
        registry = AdapterRegistry([bare, AIRJET])
        assert registry.select_by_signature(AIRJET_RAW) is AIRJET


class TestRegistry:
    def test_duplicate_id_rejected(self):
        registry = default_registry()
        with pytest.raises(ValueError, match="already registered"):
            registry.register(AIRJET)

    def test_get_unknown_lists_available(self):
        with pytest.raises(KeyError, match="Hydrojet_Pro"):
            MODEL_REGISTRY.get("Nope")

    def test_model_capabilities_union(self):
        assert MODEL_REGISTRY.model_capabilities == {"msg_onoff", "massage_mode", "jet_onoff"}

    def test_order_is_registration_order(self):
        assert [d.id for d in MODEL_REGISTRY] == ["Airjet", "Hydrojet_Pro"]
        assert len(MODEL_REGISTRY) == 2
