"""Loader/filter stage: period windows and dimension filters."""

from .dimensions import effective_agent, index_projects
from .period import resolve_cutoff
from .window import Selection, select_window

__all__ = ["Selection", "effective_agent", "index_projects", "resolve_cutoff", "select_window"]
