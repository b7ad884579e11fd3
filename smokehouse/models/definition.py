"""Models for the smoke test registry loaded from smoke-tests.yaml files."""

from collections.abc import Mapping, Sequence
from pathlib import Path

from pydantic import Field, model_validator

from smokehouse.models.base import Model


class ServerSpec(Model):
    """A static file server backing the smoke tests."""

    name: str = Field(..., description="Human-readable server name")
    root: Path = Field(..., description="Directory served as the document root")
    host: str = Field(default="localhost", description="Interface to bind")
    port: int = Field(..., ge=0, le=65535, description="Port to bind (0 = any)")


class SmokeTestDefinition(Model):
    """A single smoke test, run as one child process."""

    __test__ = False

    id: str = Field(..., min_length=1, description="Unique test identifier")
    expectations: str = Field(..., description="Path to the expectations module")
    config: str = Field(..., description="Path to the config used for the run")
    batch: str | None = Field(
        default=None, description="Batch key (None means the default batch)"
    )


class SmokeRegistry(Model):
    """Complete registry of smoke tests."""

    version: str = Field(..., description="Registry schema version")
    command: Sequence[str] = Field(
        ..., min_length=1, description="Command prefix launching one smoke test"
    )
    servers: Sequence[ServerSpec] = Field(
        default_factory=list, description="Servers started for the whole run"
    )
    tests: Sequence[SmokeTestDefinition] = Field(
        default_factory=list, description="Smoke tests in registry order"
    )

    @model_validator(mode="after")
    def check_unique_ids(self) -> "SmokeRegistry":
        seen: set[str] = set()
        duplicates: list[str] = []
        for test in self.tests:
            if test.id in seen:
                duplicates.append(test.id)
            seen.add(test.id)
        if duplicates:
            raise ValueError(f"Duplicate smoke test ids: {', '.join(duplicates)}")
        return self

    def by_id(self) -> Mapping[str, SmokeTestDefinition]:
        """Map test ids to their definitions."""
        return {test.id: test for test in self.tests}
