from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .window import JustNote as JustNote

__all__ = ["JustNote"]


def __getattr__(name: str):
    if name == "JustNote":
        from .window import JustNote as _JustNote

        return _JustNote
    raise AttributeError(name)
