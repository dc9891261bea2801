"""Locate numeric literals in source files for the tweak pane."""

from consult_user.resolvers.css import resolve_css
from consult_user.resolvers.text_search import resolve_text_search
from consult_user.resolvers.tweak import TweakParameter, resolve_tweak_parameters, to_kebab_case
from consult_user.resolvers.utils import ResolvedLocation, offset_to_position, split_numeric_suffix

__all__ = [
    "ResolvedLocation",
    "TweakParameter",
    "offset_to_position",
    "resolve_css",
    "resolve_text_search",
    "resolve_tweak_parameters",
    "split_numeric_suffix",
    "to_kebab_case",
]
