from __future__ import annotations

import json
import logging
import tomllib
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Mapping, get_type_hints

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HeapConfig:
    # False turns the heap into a min-heap
    max_heap: bool = True
    # Run IndexedPriorityHeap.verify() after every mutation
    check_invariants: bool = False

    @classmethod
    def from_file(cls, config_path: str | Path) -> HeapConfig:
        path = Path(config_path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")
        if path.suffix == ".toml":
            data = tomllib.loads(path.read_text())
        elif path.suffix == ".json":
            data = json.loads(path.read_text())
        else:
            raise ValueError(
                f"Unsupported config format: {path.suffix}. Use .toml or .json."
            )
        if not isinstance(data, Mapping):
            raise ValueError("Config must parse to a mapping at the top level.")
        logger.debug("Loaded heap config from %s", path)
        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> HeapConfig:
        field_names = {f.name for f in fields(cls)}
        unknown = [key for key in data if key not in field_names]
        if unknown:
            keys = ", ".join(sorted(unknown))
            raise ValueError(f"Unknown config field(s): {keys}")

        type_hints = get_type_hints(cls)
        for name, incoming in data.items():
            cls._check_type(type_hints[name], incoming, path=name)
        return cls(**data)

    def with_updates(self, updates: Mapping[str, Any]) -> HeapConfig:
        merged = asdict(self)
        merged.update(updates)
        return type(self).from_dict(merged)

    @classmethod
    def _check_type(cls, field_type: Any, incoming: Any, *, path: str) -> None:
        # isinstance(1, bool) is False
        if isinstance(field_type, type) and not isinstance(incoming, field_type):
            raise ValueError(
                f"Expected {field_type.__name__} for config field `{path}`, "
                f"got {type(incoming).__name__}."
            )
