"""Discover and instantiate all probes."""

from __future__ import annotations

import importlib

from firstever.models import ACTIVITY_FIELDS
from firstever.probes.base import BaseProbe, ProbeContext

_PROBE_MODULES = [
    "firstever.probes.profile",
    "firstever.probes.repos",
    "firstever.probes.search",
    "firstever.probes.activity",
]

__all__ = ["BaseProbe", "ProbeContext", "get_all_probes"]


def get_all_probes() -> list[BaseProbe]:
    """Import every probe module and return one instance per result field.

    Probes come back in the order of the fields on ``FirstEverythingResult``.
    """
    by_field: dict[str, BaseProbe] = {}
    for mod_path in _PROBE_MODULES:
        mod = importlib.import_module(mod_path)
        for attr_name in dir(mod):
            attr = getattr(mod, attr_name)
            if (
                isinstance(attr, type)
                and issubclass(attr, BaseProbe)
                and attr is not BaseProbe
                and attr.field
                and attr.field not in by_field
            ):
                by_field[attr.field] = attr()
    return [by_field[name] for name in ACTIVITY_FIELDS if name in by_field]
