from __future__ import annotations

from collections.abc import Iterable, Sequence
from importlib import import_module
from types import ModuleType
from typing import Any


def _split_module_parts(names: Iterable[str]) -> set[str]:
    set_parts: set[str] = set()
    for _name in names:
        set_parts |= set(_name.split("."))
    set_parts.discard("")
    return set_parts


def build_optional_dependency_error(
    *,
    feature: str,
    extras: Sequence[str],
    missing_module: str | None,
) -> ModuleNotFoundError:
    c_extras = ",".join(dict.fromkeys(extras))
    c_missing = f" (`{missing_module}` is not installed)" if missing_module else ""
    return ModuleNotFoundError(
        f"{feature} is unavailable{c_missing}. "
        f"Install it with `pip install \"gridkit[{c_extras}]\"`."
    )


def import_optional_module(
    *,
    module_name: str,
    package: str,
    feature: str,
    extras: Sequence[str],
    required_modules: Sequence[str],
) -> ModuleType:
    """
    Import ``module_name``, turning a missing optional engine into an install
    hint.

    Only a missing module that is one of ``required_modules`` is translated; any
    other ``ModuleNotFoundError`` propagates unchanged. An empty
    ``required_modules`` translates every missing module.
    """
    try:
        return import_module(module_name, package=package)
    except ModuleNotFoundError as exc:
        set_missing = _split_module_parts([exc.name or ""])
        if required_modules and not set_missing & _split_module_parts(required_modules):
            raise
        raise build_optional_dependency_error(
            feature=feature, extras=extras, missing_module=exc.name
        ) from exc


def import_optional_attr(
    *,
    module_name: str,
    attr_name: str,
    package: str,
    feature: str,
    extras: Sequence[str],
    required_modules: Sequence[str],
) -> Any:
    return getattr(
        import_optional_module(
            module_name=module_name,
            package=package,
            feature=feature,
            extras=extras,
            required_modules=required_modules,
        ),
        attr_name,
    )
