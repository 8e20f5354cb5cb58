from __future__ import annotations

from modelsentinel.domain.model import Cost, Limits, Modalities, ModelStatus
from modelsentinel.domain.reconciliation import compute_field_changes
from modelsentinel.domain.reconciliation.fields import same_members
from tests.helpers.catalog import make_discovered, make_model


def test_capability_order_is_ignored() -> None:
    existing = make_model("a", capabilities=("chat", "vision"))
    discovered = make_discovered("a", capabilities=("vision", "chat"))

    assert compute_field_changes(existing, discovered) == []


def test_missing_values_mean_no_opinion() -> None:
    existing = make_model("a", cost=Cost(0.01, 0.03))
    discovered = make_discovered(
        "a",
        family=None,
        status=None,
        capabilities=None,
        max_tokens=None,
        max_completion_tokens=None,
        cost=Cost(0.0, 0.0),
    )

    assert compute_field_changes(existing, discovered) == []


def test_cost_added_to_model_without_cost() -> None:
    existing = make_model("a")
    discovered = make_discovered("a", cost=Cost(0.002, 0.008))

    (change,) = compute_field_changes(existing, discovered)

    assert change.field == "cost"
    assert change.old is None
    assert change.new == {"input_per_1k": 0.002, "output_per_1k": 0.008}


def test_cost_and_limit_changes_are_per_field() -> None:
    existing = make_model("a", cost=Cost(0.01, 0.03), max_completion_tokens=4_096)
    discovered = make_discovered("a", cost=Cost(0.01, 0.06), max_completion_tokens=8_192)

    changes = compute_field_changes(existing, discovered)

    assert [change.field for change in changes] == [
        "cost.output_per_1k",
        "limits.max_completion_tokens",
    ]


def test_modalities_compare_each_direction() -> None:
    existing = make_model("a")
    discovered = make_discovered("a")
    discovered.modalities = Modalities(input=("text", "image"), output=None)
    discovered.limits = Limits()

    changes = compute_field_changes(existing, discovered)

    assert [(change.field, change.new) for change in changes] == [
        ("modalities.input", ["text", "image"])
    ]


def test_same_members() -> None:
    assert same_members(["a", "b"], ("b", "a"))
    assert not same_members(["a"], ["a", "b"])


def test_capability_removal_alone_is_reported() -> None:
    existing = make_model("a", capabilities=("chat", "vision"))
    discovered = make_discovered("a", capabilities=("chat",))

    (change,) = compute_field_changes(existing, discovered)

    assert change.field == "capabilities"
    assert change.old == ["chat", "vision"]
    assert change.new == ["chat"]


def test_zero_cost_never_appears_beside_a_status_change() -> None:
    existing = make_model("a", status="stable", cost=Cost(0.005, 0.015))
    discovered = make_discovered("a", status=ModelStatus.BETA, cost=Cost(0.0, 0.0))

    (change,) = compute_field_changes(existing, discovered)

    assert change.field == "status"
    assert (change.old, change.new) == ("stable", "beta")
    assert type(change.new) is str
