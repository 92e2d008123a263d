# core/schema_registry.py
from __future__ import annotations
from typing import Callable, List, Tuple
from sqlalchemy.engine import Engine
import importlib
import logging
import pkgutil
import sys
from pathlib import Path

logger = logging.getLogger(__name__)

# Schema installer type
SchemaInstaller = Callable[[Engine], None]

# Registry: (name, installer_func)
_REGISTRY: List[Tuple[str, SchemaInstaller]] = []

def register(
    name: str | SchemaInstaller, installer: SchemaInstaller | None = None
) -> SchemaInstaller | Callable[[SchemaInstaller], SchemaInstaller]:
    """
    Registers a schema installer function.
    Can be used as a decorator (@register) or a function call (register("name", fn)).
    Registering the same name twice keeps the first installer.
    """
    def _add(key: str, fn: SchemaInstaller) -> SchemaInstaller:
        if all(existing != key for existing, _ in _REGISTRY):
            _REGISTRY.append((key, fn))
        return fn

    # Used as @register("name")
    if isinstance(name, str) and installer is None:
        def decorator(fn: SchemaInstaller) -> SchemaInstaller:
            return _add(name, fn)
        return decorator

    # Used as @register
    elif callable(name) and installer is None:
        return _add(name.__name__, name)

    # Used as register("name", fn)
    elif isinstance(name, str) and callable(installer):
        return _add(name, installer)

    raise TypeError("Invalid usage of @register")

def run_all(engine: Engine):
    """
    Runs all registered schema installers in order.
    A failing installer is logged and the remaining installers still run.
    """
    logger.info("SchemaRegistry: Running %d installers...", len(_REGISTRY))
    for name, installer_fn in _REGISTRY:
        try:
            logger.info("  -> Applying schema: %s", name)
            installer_fn(engine)
        except Exception:
            logger.error("  -> FAILED to apply schema %s", name, exc_info=True)
    logger.info("SchemaRegistry: All installers complete.")

def registered_names() -> List[str]:
    return [name for name, _ in _REGISTRY]

def auto_discover(
    start_path: str | Path = "schemas",
    root_package: str | None = None
):
    """
    Dynamically imports all modules in a directory to trigger @register decorators.

    :param start_path: The directory path to start discovery (e.g., "schemas").
    :param root_package: The parent package name (optional).
    """
    if isinstance(start_path, str):
        start_path = Path(start_path)

    if not start_path.is_dir():
        logger.warning("Schema auto_discover: Path %s is not a directory. Skipping.", start_path)
        return

    if root_package:
        base_import_name = f"{root_package}.{start_path.name}"
    else:
        # Add parent dir to sys.path if not already there
        parent_dir = str(start_path.parent.resolve())
        if parent_dir not in sys.path:
            sys.path.insert(0, parent_dir)
        base_import_name = start_path.name

    for _, module_name, is_pkg in pkgutil.walk_packages(
        path=[str(start_path)],
        prefix=f"{base_import_name}."
    ):
        if is_pkg:
            continue
        importlib.import_module(module_name)
        logger.debug("  -> Discovered: %s", module_name)
