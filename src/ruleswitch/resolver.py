from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass

from ruleswitch.catalog import DirectoryId, RegisteredSymbol, get_valid_directories, list_implementations
from ruleswitch.naming import canonical_identifier

logger = logging.getLogger(__name__)

Lister = Callable[[DirectoryId], Sequence[RegisteredSymbol] | None]


@dataclass(frozen=True, slots=True)
class SymbolQuery:
    logical_name: str
    suffix: str
    search_path: tuple[DirectoryId | None, ...] = ()

    @property
    def canonical_id(self) -> str:
        return canonical_identifier(self.logical_name, self.suffix)


def find_symbol(
    name: str,
    suffix: str,
    directories: DirectoryId | Iterable[DirectoryId | None] | None,
    *,
    lister: Lister = list_implementations,
) -> RegisteredSymbol | None:
    """
    Find the implementation of `name` for the role named by `suffix`.

    Directories are tried in order and the first one with a match wins, no
    matter how the match was made. Within a directory an implementation
    matches when its declared identifier equals the canonical identifier of
    `name`, or when its raw-name override equals `name` exactly.
    """

    query = SymbolQuery(logical_name=name, suffix=suffix, search_path=tuple(get_valid_directories(directories)))
    return resolve(query, lister=lister)


def resolve(query: SymbolQuery, *, lister: Lister = list_implementations) -> RegisteredSymbol | None:
    canonical_id = query.canonical_id
    for directory in query.search_path:
        if directory is None:
            continue
        symbols = lister(directory)
        if not symbols:
            continue
        for symbol in symbols:
            if symbol.matches(canonical_id=canonical_id, raw_name=query.logical_name):
                logger.debug("resolved %r as %s in %s", query.logical_name, symbol.canonical_id, directory)
                return symbol

    logger.debug("no %s implementation found for %r (expected %s)", query.suffix, query.logical_name, canonical_id)
    return None
