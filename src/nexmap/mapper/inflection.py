"""Inflection - Singular/plural word forms and type keys.

Relation method names are derived from these transforms:

    >>> plural("otu")
    'otus'
    >>> singular("edges")
    'edge'
    >>> type_key("Outer::Otus")
    'otus'

Each table is scanned in order and every rule that matches the original
word produces a candidate from the original word. The last matching rule
wins outright; candidates are never fed into later rules.
"""

from __future__ import annotations

import re

PLURALS: list[tuple[str, str]] = [
    (r"$", "s"),
    (r"s$", "s"),
    (r"(ax|test)is$", r"\1es"),
    (r"(octop|vir)us$", r"\1i"),
    (r"(alias|status)$", r"\1es"),
    (r"(bu)s$", r"\1ses"),
    (r"(buffal|tomat)o$", r"\1oes"),
    (r"([ti])um$", r"\1a"),
    (r"sis$", "ses"),
    (r"(?:([^f])fe|([lr])f)$", r"\1\2ves"),
    (r"(hive)$", r"\1s"),
    (r"([^aeiouy]|qu)y$", r"\1ies"),
    (r"(x|ch|ss|sh)$", r"\1es"),
    (r"(matr|vert|ind)(?:ix|ex)$", r"\1ices"),
    (r"([m|l])ouse$", r"\1ice"),
    (r"^(ox)$", r"\1en"),
    (r"(quiz)$", r"\1zes"),
]

SINGULARS: list[tuple[str, str]] = [
    (r"s$", ""),
    (r"(n)ews$", r"\1ews"),
    (r"([ti])a$", r"\1um"),
    (r"((a)naly|(b)a|(d)iagno|(p)arenthe|(p)rogno|(s)ynop|(t)he)ses$", r"\1\2sis"),
    (r"(^analy)ses$", r"\1sis"),
    (r"([^f])ves$", r"\1fe"),
    (r"(hive)s$", r"\1"),
    (r"(tive)s$", r"\1"),
    (r"([lr])ves$", r"\1f"),
    (r"([^aeiouy]|qu)ies$", r"\1y"),
    (r"(s)eries$", r"\1eries"),
    (r"(m)ovies$", r"\1ovie"),
    (r"(x|ch|ss|sh)es$", r"\1"),
    (r"([m|l])ice$", r"\1ouse"),
    (r"(bus)es$", r"\1"),
    (r"(o)es$", r"\1"),
    (r"(shoe)s$", r"\1"),
    (r"(cris|ax|test)es$", r"\1is"),
    (r"(octop|vir)i$", r"\1us"),
    (r"(alias|status)es$", r"\1"),
    (r"^(ox)en", r"\1"),
    (r"(vert|ind)ices$", r"\1ex"),
    (r"(matr)ices$", r"\1ix"),
    (r"(quiz)zes$", r"\1"),
    (r"(database)s$", r"\1"),
]

_PLURAL_RULES = [(re.compile(p, re.IGNORECASE), r) for p, r in PLURALS]
_SINGULAR_RULES = [(re.compile(p, re.IGNORECASE), r) for p, r in SINGULARS]


def _inflect(word: str, rules: list[tuple[re.Pattern[str], str]]) -> str:
    result = word
    for pattern, replacement in rules:
        if pattern.search(word):
            result = pattern.sub(replacement, word)
    return result


def singular(word: str) -> str:
    """Return the singular form of a word (``"otus"`` -> ``"otu"``)."""
    return _inflect(word, _SINGULAR_RULES)


def plural(word: str) -> str:
    """Return the plural form of a word (``"box"`` -> ``"boxes"``)."""
    return _inflect(word, _PLURAL_RULES)


def type_key(name: str | type) -> str:
    """Return the lower-cased trailing component of a qualified type name.

    Args:
        name: A qualified name using ``::`` or ``.`` separators, or a class.

    Returns:
        The key used to name reciprocal relation methods.
    """
    if isinstance(name, type):
        name = name.__qualname__
    return re.split(r"[.:]+", name)[-1].lower()


__all__ = ["PLURALS", "SINGULARS", "plural", "singular", "type_key"]
