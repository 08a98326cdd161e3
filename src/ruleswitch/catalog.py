from __future__ import annotations

import importlib
import importlib.util
import inspect
import logging
import pkgutil
import sys
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from functools import lru_cache
from hashlib import sha256
from pathlib import Path
from types import ModuleType
from typing import Any

logger = logging.getLogger(__name__)

DirectoryId = str | Path

_EXPORT_ATTRS = ("ruleswitch_symbols", "SYMBOLS")
_RAW_NAME_ATTRS = ("RULE_NAME", "NAME")
_PRIVATE_NAMESPACE = "_ruleswitch_dirs"


class SymbolLoadError(RuntimeError):
    """Raised when a module inside a search directory cannot be imported or exports junk."""


@dataclass(frozen=True, slots=True)
class SymbolDescriptor:
    canonical_id: str
    raw_name_override: str | None = None


@dataclass(frozen=True, slots=True)
class RegisteredSymbol:
    descriptor: SymbolDescriptor
    factory: Callable[..., Any]

    @property
    def canonical_id(self) -> str:
        return self.descriptor.canonical_id

    def matches(self, *, canonical_id: str, raw_name: str) -> bool:
        if self.descriptor.canonical_id == canonical_id:
            return True
        return self.descriptor.raw_name_override is not None and self.descriptor.raw_name_override == raw_name


@dataclass(frozen=True, slots=True)
class DirectoryCatalog:
    directory: str
    symbols: tuple[RegisteredSymbol, ...]

    def __bool__(self) -> bool:
        return bool(self.symbols)


def get_valid_directories(directories: DirectoryId | Iterable[DirectoryId | None] | None) -> list[DirectoryId | None]:
    """
    Normalize the various ways callers pass search locations into a list.

    `None` entries inside a list are kept; the resolver skips them. Blank
    strings are absent locations too and become `None`, so they never stand
    for the current directory.
    """

    if directories is None:
        return []
    if isinstance(directories, str | Path):
        directories = [directories]
    return [None if isinstance(d, str) and not d.strip() else d for d in directories]


def describe(obj: Any) -> SymbolDescriptor:
    name = getattr(obj, "__name__", None) or type(obj).__name__
    raw_name: str | None = None
    for attr in _RAW_NAME_ATTRS:
        value = getattr(obj, attr, None)
        if isinstance(value, str) and value.strip():
            raw_name = value
            break
    return SymbolDescriptor(canonical_id=name, raw_name_override=raw_name)


def list_implementations(directory: DirectoryId) -> tuple[RegisteredSymbol, ...]:
    """Return the implementations exposed by `directory`, in exposure order."""

    return load_directory(directory).symbols


def load_directory(directory: DirectoryId) -> DirectoryCatalog:
    """
    Scan one search location.

    A `Path` is always a filesystem directory. A string names an existing
    directory first (relative to the working directory), otherwise a dotted
    import name such as `ruleswitch.rules`. Blank strings and locations that
    exist neither way give an empty catalog.
    """

    return _load_directory(_directory_key(directory))


def clear_catalog_cache() -> None:
    _load_directory.cache_clear()


def _directory_key(directory: DirectoryId) -> str:
    if isinstance(directory, Path):
        return str(directory.expanduser().resolve())
    if not directory.strip():
        return ""
    candidate = Path(directory).expanduser()
    if candidate.is_dir():
        return str(candidate.resolve())
    return directory.strip()


@lru_cache(maxsize=64)
def _load_directory(key: str) -> DirectoryCatalog:
    path = Path(key)
    modules: list[ModuleType]
    if not key:
        modules = []
    elif path.is_dir():
        modules = list(_import_directory_files(path))
    elif _looks_like_module_name(key):
        modules = list(_import_package(key))
    else:
        logger.debug("catalog: location does not exist: %s", key)
        modules = []

    symbols: list[RegisteredSymbol] = []
    for module in modules:
        for obj in _extract_symbols(module):
            symbols.append(RegisteredSymbol(descriptor=describe(obj), factory=obj))

    logger.debug("catalog: %d symbol(s) in %s", len(symbols), key)
    return DirectoryCatalog(directory=key, symbols=tuple(symbols))


def _looks_like_module_name(value: str) -> bool:
    parts = value.split(".")
    return bool(value) and all(part.isidentifier() for part in parts)


def _import_directory_files(directory: Path) -> Iterable[ModuleType]:
    digest = sha256(str(directory).encode("utf-8")).hexdigest()[:12]
    namespace = f"{_PRIVATE_NAMESPACE}.d{digest}"
    for file in sorted(directory.glob("*.py")):
        if file.name.startswith("_"):
            continue
        module_name = f"{namespace}.{file.stem}"
        spec = importlib.util.spec_from_file_location(module_name, file)
        if spec is None or spec.loader is None:  # pragma: no cover
            raise SymbolLoadError(f"Cannot build an import spec for {file}")
        module = importlib.util.module_from_spec(spec)
        sys.modules[module_name] = module
        try:
            spec.loader.exec_module(module)
        except Exception as exc:  # noqa: BLE001
            sys.modules.pop(module_name, None)
            raise SymbolLoadError(f"Failed to import {file}: {exc}") from exc
        yield module


def _import_package(name: str) -> Iterable[ModuleType]:
    try:
        package = importlib.import_module(name)
    except ModuleNotFoundError as exc:
        # Only a missing location is tolerated; a missing dependency inside it is not.
        if exc.name is None or not (name == exc.name or name.startswith(f"{exc.name}.")):
            raise SymbolLoadError(f"Failed to import module {name!r}: {exc}") from exc
        logger.debug("catalog: module not found: %s", name)
        return
    except Exception as exc:  # noqa: BLE001
        raise SymbolLoadError(f"Failed to import module {name!r}: {exc}") from exc

    search_path = getattr(package, "__path__", None)
    if search_path is None:
        yield package
        return

    for info in pkgutil.iter_modules(search_path):
        if info.name.startswith("_"):
            continue
        qualified = f"{name}.{info.name}"
        try:
            yield importlib.import_module(qualified)
        except Exception as exc:  # noqa: BLE001
            raise SymbolLoadError(f"Failed to import module {qualified!r}: {exc}") from exc


def _extract_symbols(module: ModuleType) -> list[Any]:
    for attr in _EXPORT_ATTRS:
        if hasattr(module, attr):
            return _coerce_exports(getattr(module, attr), module=module)

    out: list[Any] = []
    for name, obj in vars(module).items():
        if name.startswith("_") or not inspect.isclass(obj):
            continue
        if obj.__module__ != module.__name__ or inspect.isabstract(obj):
            continue
        out.append(obj)
    return out


def _coerce_exports(obj: Any, *, module: ModuleType) -> list[Any]:
    if callable(obj) and not inspect.isclass(obj):
        obj = obj()
    if isinstance(obj, list | tuple):
        return list(obj)
    raise SymbolLoadError(f"Unsupported export type in {module.__name__}: {type(obj).__name__}")
