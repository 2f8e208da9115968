"""camelCase helpers shared by the Pydantic models and the CLI.

The wire format of a scan result uses camelCase keys (``httpOnly``,
``expiresIso``...) while the Python attributes stay snake_case.
"""

from __future__ import annotations

from typing import Any

import pydantic


def snake_to_camel(name: str) -> str:
    """Convert a snake_case string to camelCase.

    Args:
        name: A snake_case identifier such as ``"first_party"``.

    Returns:
        The camelCase equivalent, e.g. ``"firstParty"``.
    """
    parts = name.split("_")
    return parts[0] + "".join(w.capitalize() for w in parts[1:])


def to_wire_dict(model: pydantic.BaseModel) -> dict[str, Any]:
    """Dump *model* using its camelCase aliases."""
    return model.model_dump(by_alias=True)
