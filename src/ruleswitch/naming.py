from __future__ import annotations

import re

_WORD_BREAK_RE = re.compile(r"[-_\s]+(.)?")
_EDGE_RE = re.compile(r"^([-_]*)(.*?)([-_]*)$", re.DOTALL)


def camelize(value: str) -> str:
    """
    Join hyphen/underscore/space separated words: `no-unused-var` -> `noUnusedVar`.

    The first character is left untouched, so `NoUnused` stays `NoUnused`.
    """

    return _WORD_BREAK_RE.sub(lambda m: m.group(1).upper() if m.group(1) else "", value.strip())


def canonical_identifier(name: str, suffix: str) -> str:
    """
    Build the identifier an implementation of `name` is expected to declare.

    Leading/trailing runs of `-`/`_` are kept as-is, the interior is camelized,
    the first character is uppercased and `suffix` is appended verbatim:

    - `no-unused-var` + `Rule` -> `NoUnusedVarRule`
    - `_foo_` + `Rule` -> `_foo_Rule`
    """

    match = _EDGE_RE.match(name)
    result = name
    if match is not None:
        result = match.group(1) + camelize(match.group(2)) + match.group(3)
    if not result:
        return suffix
    return result[0].upper() + result[1:] + suffix
