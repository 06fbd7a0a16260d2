"""Canonicalize ingredient names into product-cache keys."""

from __future__ import annotations

import re
from typing import Dict

ALIAS_MAP: Dict[str, str] = {
    "spring onions": "green onion",
    "spring onion": "green onion",
    "scallions": "green onion",
    "scallion": "green onion",
    "roma tomatoes": "tomato",
    "tomatoes": "tomato",
    "extra virgin olive oil": "olive oil",
    "chicken breasts": "chicken breast",
    "chicken thighs": "chicken thigh",
    "eggs": "egg",
    "prawns": "prawn",
    "garlic cloves": "garlic",
    "cilantro": "coriander",
    "bell pepper": "capsicum",
    "red capsicum": "capsicum",
}

DESCRIPTORS = [
    "fresh",
    "dried",
    "chopped",
    "minced",
    "diced",
    "organic",
    "large",
    "small",
    "to taste",
    "finely",
    "sliced",
    "grated",
    "peeled",
    "crushed",
    "ground",
    "halved",
    "roughly",
    "thinly",
]

_PARENTHETICAL = re.compile(r"\([^)]*\)")
_PUNCT = re.compile(r"[\.;:\[\]\\/\"]")


def canonicalize(name: str) -> str:
    """Lowercase, drop notes and descriptors, apply alias map, and collapse spaces.

    "Fresh Roma tomatoes (about 4), diced" -> "tomato"
    """
    if not name:
        return ""
    s = name.lower()
    # parenthetical notes and anything after the first comma are prep notes
    s = _PARENTHETICAL.sub(" ", s)
    s = s.split(",", 1)[0]
    s = s.replace("-", " ")
    s = _PUNCT.sub(" ", s)
    for d in DESCRIPTORS:
        s = re.sub(r"\b" + re.escape(d) + r"\b", "", s)
    s = re.sub(r"\s+", " ", s).strip()
    if s in ALIAS_MAP:
        s = ALIAS_MAP[s]
    return s
