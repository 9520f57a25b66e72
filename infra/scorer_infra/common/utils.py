from typing import Any, Mapping, Optional
from collections import abc
import logging


logger = logging.getLogger(__name__)


def coalesce(*values):
    return next((v for v in values if v is not None), None)


def deepmerge(*layers: Optional[Mapping[str, Any]],
        ignore_none: bool = True) -> dict[str, Any]:
    """
    Merge config layers left to right into a new dict. Nested mappings are
    merged key by key, while lists and scalars in later layers replace
    earlier values. None values are skipped unless ignore_none is False.
    No layer is modified.
    """
    merged: dict[str, Any] = {}

    for layer in layers:
        if not layer:
            continue

        for key, value in layer.items():
            if (value is None) and ignore_none:
                continue

            existing = merged.get(key)

            if isinstance(value, abc.Mapping):
                if (existing is not None) and not isinstance(existing, abc.Mapping):
                    logger.warning(f"Replacing non-mapping value of '{key}' with a mapping")
                    existing = None

                merged[key] = deepmerge(existing, value, ignore_none=ignore_none)
            elif isinstance(value, list):
                merged[key] = list(value)
            else:
                merged[key] = value

    return merged


def to_camel(string: str) -> str:
    first, *rest = string.split('_')
    return first + ''.join(word.capitalize() for word in rest)
