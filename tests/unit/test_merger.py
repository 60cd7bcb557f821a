"""Tests for merging parsed rates into the rate set."""

import copy

from benefit_rates.core.merger import merge_rates
from benefit_rates.core.models import ChangeKind, RateSet
from benefit_rates.core.validator import flatten_rates

STATE_PENSION_KEYS = {"state_pension": ("state_pension_full_new_weekly",)}


def resolve(values, **root_keys):
    layout = {benefit_id: () for benefit_id in values if isinstance(values[benefit_id], dict)}
    layout.update(root_keys)
    return RateSet.resolve(values, layout)


def kinds(result):
    return {event.path: event.kind for event in result.events}


class TestGroupedMerge:
    """Tests for benefits stored as nested objects."""

    def test_changed_value(self):
        """Test a differing value is replaced and reported."""
        rate_set = resolve({"pip": {"mobility_standard_weekly": 28.7}})
        result = merge_rates({"pip": {"mobility_standard_weekly": 29.2}}, rate_set)

        assert result.rates["pip"]["mobility_standard_weekly"] == 29.2
        assert result.changed == 1
        event = result.events[0]
        assert (event.kind, event.path, event.old, event.new) == (
            ChangeKind.CHANGED, "pip.mobility_standard_weekly", 28.7, 29.2,
        )

    def test_unchanged_keeps_stored_value(self):
        """Test equal values keep the stored object."""
        stored = {"attendance_allowance": {"higher_weekly": 110.4, "lower_weekly": 339}}
        rate_set = resolve(stored)
        result = merge_rates({"attendance_allowance": {"lower_weekly": 339.0}}, rate_set)

        value = result.rates["attendance_allowance"]["lower_weekly"]
        assert value == 339
        assert isinstance(value, int)
        assert result.changed == 0
        assert result.unchanged == 1

    def test_new_key(self):
        """Test a key without a prior value is new."""
        rate_set = resolve({"child_benefit": {"first_child_weekly": 26.05}})
        result = merge_rates({"child_benefit": {"hicbc_threshold": 60000}}, rate_set)

        assert result.rates["child_benefit"]["hicbc_threshold"] == 60000
        assert kinds(result)["child_benefit.hicbc_threshold"] == ChangeKind.NEW
        assert result.changed == 1

    def test_unparsed_keys_are_kept(self):
        """Test stored keys that were not parsed survive and are counted."""
        rate_set = resolve({"pip": {"a": 1.0, "b": 2.0, "note": "text"}})
        result = merge_rates({"pip": {"a": 1.5}}, rate_set)

        assert result.rates["pip"] == {"a": 1.5, "b": 2.0, "note": "text"}
        assert result.kept == 1
        assert kinds(result)["pip.b"] == ChangeKind.KEPT

    def test_new_benefit(self):
        """Test a benefit missing from the store becomes a new group."""
        rate_set = RateSet.resolve({}, {"maternity_allowance": ()})
        result = merge_rates({"maternity_allowance": {"weekly": 187.18}}, rate_set)

        assert result.rates == {"maternity_allowance": {"weekly": 187.18}}
        assert result.changed == 1

    def test_empty_parse_changes_nothing(self):
        """Test an empty mapping for a benefit keeps everything."""
        stored = {"pip": {"a": 1.0}}
        result = merge_rates({"pip": {}}, resolve(stored))

        assert result.rates == stored
        assert result.changed == 0
        assert result.kept == 1

    def test_non_finite_and_bool_skipped(self):
        """Test values that are not finite numbers are ignored."""
        rate_set = resolve({"pip": {"a": 1.0}})
        result = merge_rates(
            {"pip": {"a": float("nan"), "b": float("inf"), "c": True}},
            rate_set,
        )

        assert result.rates["pip"] == {"a": 1.0}
        assert result.changed == 0

    def test_huge_integer_stored_value(self):
        """Test an int too large for a float is merged like any other number."""
        rate_set = resolve({"pip": {"a": 10**400, "b": 10**400}})
        result = merge_rates({"pip": {"a": 29.2}}, rate_set)

        assert result.rates["pip"] == {"a": 29.2, "b": 10**400}
        assert kinds(result) == {"pip.a": ChangeKind.CHANGED, "pip.b": ChangeKind.KEPT}

    def test_inputs_not_mutated(self):
        """Test the stored mapping is not modified."""
        stored = {"pip": {"a": 1.0}}
        snapshot = copy.deepcopy(stored)
        merge_rates({"pip": {"a": 2.0, "b": 3.0}}, resolve(stored))
        assert stored == snapshot


class TestRootKeyMerge:
    """Tests for benefits stored at the root."""

    def test_root_value_updated(self):
        """Test root-level keys are merged onto the root."""
        stored = {"pip": {"a": 1.0}, "state_pension_full_new_weekly": 221.2}
        rate_set = RateSet.resolve(stored, {"pip": (), **STATE_PENSION_KEYS})
        result = merge_rates(
            {"state_pension": {"state_pension_full_new_weekly": 230.25}},
            rate_set,
        )

        assert result.rates["state_pension_full_new_weekly"] == 230.25
        assert "state_pension" not in result.rates
        assert kinds(result)["state_pension_full_new_weekly"] == ChangeKind.CHANGED

    def test_declared_root_key_kept(self):
        """Test an unparsed declared root key is counted as kept."""
        stored = {"state_pension_full_new_weekly": 221.2}
        rate_set = RateSet.resolve(stored, STATE_PENSION_KEYS)
        result = merge_rates({"state_pension": {}}, rate_set)

        assert result.rates == stored
        assert result.kept == 1

    def test_root_key_added(self):
        """Test a root key absent from the store is new."""
        rate_set = RateSet.resolve({}, STATE_PENSION_KEYS)
        result = merge_rates(
            {"state_pension": {"state_pension_full_new_weekly": 230.25}},
            rate_set,
        )
        assert result.rates == {"state_pension_full_new_weekly": 230.25}
        assert result.changed == 1


class TestMergeProperties:
    """Properties that hold for any merge."""

    def test_identical_values_are_a_no_op(self, rates_data):
        """Test merging the stored values back changes nothing."""
        stored = rates_data["rates"]
        parsed = {
            benefit_id: dict(values)
            for benefit_id, values in stored.items()
            if isinstance(values, dict)
        }
        parsed["state_pension"] = {
            "state_pension_full_new_weekly": stored["state_pension_full_new_weekly"]
        }
        rate_set = RateSet.resolve(
            stored,
            {**{benefit_id: () for benefit_id in parsed}, **STATE_PENSION_KEYS},
        )
        result = merge_rates(parsed, rate_set)

        assert result.changed == 0
        assert not any(
            e.kind in (ChangeKind.CHANGED, ChangeKind.NEW) for e in result.events
        )
        assert result.rates == stored

    def test_never_drops_existing_keys(self, rates_data):
        """Test every stored path is still present after a partial merge."""
        stored = rates_data["rates"]
        rate_set = RateSet.resolve(stored, {"pip": (), **STATE_PENSION_KEYS})
        result = merge_rates(
            {"pip": {"mobility_standard_weekly": 30.3}, "state_pension": {}},
            rate_set,
        )
        assert set(flatten_rates(stored)) <= set(flatten_rates(result.rates))
        assert result.rates["source"] == stored["source"]
