"""Helpers to load scoring policy and preset packs."""

from __future__ import annotations

from copy import deepcopy
from functools import lru_cache
from importlib import resources
from typing import Any, Dict

import yaml

__all__ = ["load_pack", "load_preset", "preset_names"]


@lru_cache(maxsize=32)
def load_pack(pack_id: str) -> Dict[str, Any]:
    """Load the YAML pack identified by *pack_id*."""

    package = __name__ + ".packs"
    with resources.files(package).joinpath(f"{pack_id}.yml").open("r", encoding="utf-8") as fh:
        return yaml.safe_load(fh)


def preset_names() -> list[str]:
    return sorted(load_pack("presets"))


def load_preset(name: str) -> Dict[str, Any]:
    """Return a copy of the example snapshot *name*; ``KeyError`` if unknown."""

    presets = load_pack("presets")
    if name not in presets:
        raise KeyError(name)
    return deepcopy(presets[name])
