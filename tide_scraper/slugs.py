"""
Slug helpers and the Brazilian state registry.

Place names become URL identifiers by lowercasing, stripping accents and
hyphenating. A few states are published under a request-path slug that
differs from their display slug; those exceptions live in a mapping that
settings can extend.
"""

from __future__ import annotations

import re
import unicodedata
from typing import Dict, List, Mapping, Optional

from .models import StateInfo

_COMBINING_MARKS_RE = re.compile("[\u0300-\u036f]")
_INVALID_CHARS_RE = re.compile(r"[^a-z0-9\s-]")
_WHITESPACE_RE = re.compile(r"\s+")

# display slug -> slug used by the source site in request paths
DEFAULT_REQUEST_SLUG_OVERRIDES: Dict[str, str] = {
    "sao-paulo": "so-paulo",
}

BRAZILIAN_STATES = [
    "Acre",
    "Alagoas",
    "Amapá",
    "Amazonas",
    "Bahia",
    "Ceará",
    "Distrito Federal",
    "Espírito Santo",
    "Goiás",
    "Maranhão",
    "Mato Grosso",
    "Mato Grosso do Sul",
    "Minas Gerais",
    "Pará",
    "Paraíba",
    "Paraná",
    "Pernambuco",
    "Piauí",
    "Rio de Janeiro",
    "Rio Grande do Norte",
    "Rio Grande do Sul",
    "Rondônia",
    "Roraima",
    "Santa Catarina",
    "São Paulo",
    "Sergipe",
    "Tocantins",
]


def normalize_to_slug(text: Optional[str]) -> str:
    """
    Convert a free-form place name into a URL-safe slug.

    >>> normalize_to_slug("São Luís")
    'sao-luis'
    """
    if not text:
        return ""
    decomposed = unicodedata.normalize("NFD", text.lower())
    stripped = _COMBINING_MARKS_RE.sub("", decomposed)
    cleaned = _INVALID_CHARS_RE.sub("", stripped).strip()
    return _WHITESPACE_RE.sub("-", cleaned)


def _merged_overrides(overrides: Optional[Mapping[str, str]]) -> Dict[str, str]:
    merged = dict(DEFAULT_REQUEST_SLUG_OVERRIDES)
    if overrides:
        merged.update({normalize_to_slug(key): value for key, value in overrides.items()})
    return merged


def request_slug_for(state_slug: str, overrides: Optional[Mapping[str, str]] = None) -> str:
    """Return the slug the source site expects in the request path."""
    return _merged_overrides(overrides).get(state_slug, state_slug)


def list_states(overrides: Optional[Mapping[str, str]] = None) -> List[StateInfo]:
    """All states sorted by display name, with request-path exceptions attached."""
    merged = _merged_overrides(overrides)
    states = []
    for name in BRAZILIAN_STATES:
        slug = normalize_to_slug(name)
        api_slug = merged.get(slug)
        states.append(StateInfo(name=name, slug=slug, api_slug=api_slug if api_slug != slug else None))
    return sorted(states, key=lambda state: state.name)


def find_state(value: str, overrides: Optional[Mapping[str, str]] = None) -> Optional[StateInfo]:
    """Look a state up by display name or slug."""
    wanted = normalize_to_slug(value)
    if not wanted:
        return None
    for state in list_states(overrides):
        if wanted in (state.slug, state.api_slug):
            return state
    return None
