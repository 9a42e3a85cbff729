"""
Text helpers shared by the catalog and the storefront.

Product names travel in three encodings:

* Title Case, as displayed (``"Mini Palmiers"``)
* dash form, as typed into search boxes and listed in the plain-text
  data files (``"mini-palmiers"``)
* slug, the stable key stored next to each product and used in URLs and
  cart entries (``"macarons-6-pcs"``)

Title Case and dash form only invert each other for names made of single
space separated words without punctuation, which is why lookups go
through the slug whenever one is available.
"""

from __future__ import annotations

import re
from string import Template

_SLUG_SEPARATORS = re.compile(r"[^a-z0-9]+")

FLAVOR_PLACEHOLDER = "${flavor}"
BOX_PLACEHOLDER = "${box}"


def title_case(dashed: str) -> str:
    """Convert ``"mini-palmiers"`` into ``"Mini Palmiers"``.

    Only the first character of every word is upper-cased; the rest of the
    word is left untouched.
    """
    return " ".join(word[:1].upper() + word[1:] for word in dashed.split("-"))


def dash_form(name: str) -> str:
    """Convert ``"Mini Palmiers"`` into ``"mini-palmiers"``."""
    return "-".join(word.lower() for word in name.split(" "))


def slugify(name: str) -> str:
    """Return the URL-safe key for a product name.

    Runs of anything other than ASCII letters and digits collapse into a
    single dash, so ``"Macarons (6 pcs)"`` becomes ``"macarons-6-pcs"``.
    Dash form and Title Case both map to the same slug as the original
    name.
    """
    return _SLUG_SEPARATORS.sub("-", name.lower()).strip("-")


def build_description_template(description: str) -> str:
    """Derive a customization template from a plain product description.

    The flavor placeholder becomes the third word and the box placeholder
    sits right before the last word:

    >>> build_description_template("One homemade cake, freshly baked in a box.")
    'One homemade ${flavor} cake, freshly baked in a ${box} box.'
    """
    words = description.replace("$", "$$").split()
    words.insert(2, FLAVOR_PLACEHOLDER)
    words.insert(-1, BOX_PLACEHOLDER)
    return " ".join(words)


def render_description(template: str, flavor: str, box: str) -> str:
    return Template(template).safe_substitute(flavor=flavor, box=box)
