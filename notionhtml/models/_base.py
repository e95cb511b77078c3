from __future__ import annotations

import os

from pydantic import BaseModel, ConfigDict

_EXTRA_MODES = ("allow", "forbid", "ignore")


def _env_extra_mode(default: str = "ignore") -> str:
    """NOTIONHTML_EXTRA=allow|forbid|ignore; anything else falls back to `default`.

    The API adds fields to its objects regularly, so unknown keys are ignored
    unless strict capture is asked for.
    """
    raw = (os.getenv("NOTIONHTML_EXTRA") or "").strip().lower()
    return raw if raw in _EXTRA_MODES else default


class NotionModel(BaseModel):
    """Immutable snapshot of an API object."""

    model_config = ConfigDict(extra=_env_extra_mode(), frozen=True)


__all__ = ["NotionModel", "_env_extra_mode"]
