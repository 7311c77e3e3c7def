from __future__ import annotations

from datetime import UTC, datetime

from phaserules.domain.model import Condition, ConditionStatus, ManagedResource
from phaserules.domain.patch import (
    condition_from_payload,
    condition_to_payload,
    status_merge_patch,
)


def _resource() -> ManagedResource:
    return ManagedResource(
        name="bucket",
        conditions=[
            Condition(
                type="Ready",
                status=ConditionStatus.TRUE,
                last_transition_time=datetime(2024, 1, 1, tzinfo=UTC),
                observed_generation=1,
            )
        ],
    )


def test_identical_status_yields_empty_patch() -> None:
    resource = _resource()

    assert status_merge_patch(resource.snapshot(), resource) == {}


def test_patch_contains_only_changed_fields() -> None:
    resource = _resource()
    base = resource.snapshot()

    resource.phase = "Ready"

    assert status_merge_patch(base, resource) == {"phase": "Ready"}


def test_patch_replaces_condition_list_wholesale() -> None:
    resource = _resource()
    base = resource.snapshot()

    resource.conditions.append(Condition(type="Synced", status=ConditionStatus.FALSE))
    resource.observed_generation = 1

    patch = status_merge_patch(base, resource)

    assert set(patch) == {"conditions", "observed_generation"}
    assert [item["type"] for item in patch["conditions"]] == ["Ready", "Synced"]
    assert patch["conditions"][1]["status"] == "False"


def test_non_status_fields_are_ignored() -> None:
    resource = _resource()
    base = resource.snapshot()

    resource.bump_generation()

    assert status_merge_patch(base, resource) == {}


def test_condition_payload_preserves_timestamps() -> None:
    condition = _resource().conditions[0]

    payload = condition_to_payload(condition)
    restored = condition_from_payload(payload)

    assert payload["last_transition_time"] == "2024-01-01T00:00:00+00:00"
    assert restored == condition
