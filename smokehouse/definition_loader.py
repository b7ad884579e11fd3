"""Load the smoke test registry from a YAML file."""

import asyncio
from pathlib import Path

import yaml
from pydantic import ValidationError

from smokehouse.models.definition import SmokeRegistry


async def load_registry(path: Path) -> SmokeRegistry:
    """Load and validate a smoke test registry.

    Relative server roots are resolved against the directory holding the
    registry file.

    Raises:
        FileNotFoundError: If the registry file does not exist
        ValueError: If the file is not valid YAML or does not match the schema

    """
    if not path.is_file():
        raise FileNotFoundError(f"Registry file not found: {path}")

    content = await asyncio.to_thread(path.read_text, encoding="utf-8")

    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in {path}: {e}") from e

    if not isinstance(data, dict):
        raise ValueError(f"Registry {path} must contain a mapping at the top level")

    try:
        registry = SmokeRegistry.model_validate(data)
    except ValidationError as e:
        raise ValueError(f"Invalid registry {path}: {e}") from e

    base_dir = path.parent
    return registry.model_copy(
        update={
            "servers": [
                server.model_copy(update={"root": base_dir / server.root})
                for server in registry.servers
            ]
        }
    )
