"""Select smoke tests and group them into ordered batches."""

import logging
from collections.abc import Collection, Mapping, Sequence
from typing import TypeAlias

from smokehouse.models.definition import SmokeTestDefinition

log = logging.getLogger(__name__)

DEFAULT_BATCH_NAME = "default"

BatchPlan: TypeAlias = Mapping[str | None, Sequence[SmokeTestDefinition]]


def batch_display_name(batch: str | None) -> str:
    """Name shown for a batch key; None is the default batch."""
    return batch if batch is not None else DEFAULT_BATCH_NAME


def select_definitions(
    definitions: Sequence[SmokeTestDefinition],
    requested: Collection[str] = (),
) -> Sequence[SmokeTestDefinition]:
    """Filter definitions by requested batch names or test ids.

    A definition is selected when its batch name or its id is one of the
    requested tokens; "default" names the batch of definitions without one.
    With no tokens every definition is selected. Tokens matching nothing are
    logged as a warning.
    """
    if not requested:
        log.info(
            "Running ALL smoketests: %s", " ".join(test.id for test in definitions)
        )
        return list(definitions)

    tokens = set(requested)
    selected = [
        test
        for test in definitions
        if test.id in tokens or batch_display_name(test.batch) in tokens
    ]

    known = {test.id for test in definitions} | {
        batch_display_name(test.batch) for test in definitions
    }
    unmatched = [token for token in requested if token not in known]
    if unmatched:
        log.warning(
            "Smoketests not found for: %s (available: %s)",
            " ".join(unmatched),
            " ".join(sorted(known)),
        )

    log.info("Running ONLY smoketests for: %s", " ".join(t.id for t in selected))
    return selected


def plan_batches(
    definitions: Sequence[SmokeTestDefinition],
    requested: Collection[str] = (),
) -> BatchPlan:
    """Group selected definitions by batch key.

    Both batch order and order within a batch follow the order definitions
    were first seen.
    """
    batches: dict[str | None, list[SmokeTestDefinition]] = {}
    for test in select_definitions(definitions, requested):
        batches.setdefault(test.batch, []).append(test)
    return batches
