"""Router configuration.

RouterConfig is a frozen dataclass — immutable after creation, IDE-autocompletable,
no string-key dict lookups at request time.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any


@dataclass(frozen=True, slots=True)
class RouterConfig:
    """Router configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = RouterConfig(debug=True, cache="var/routes.json")

    Or build it from the nested option mapping::

        config = RouterConfig.from_mapping({
            "paths": {"controllers": "app/controllers"},
            "namespaces": {"controllers": "app.controllers"},
            "base_folder": "/blog",
        })
    """

    # Re-raise dispatch errors instead of rendering the error handler
    debug: bool = False

    # Directories searched for controller/middleware modules by file
    controllers_path: str = "controllers"
    middlewares_path: str = "middlewares"

    # Dotted package prefixes for controller/middleware references
    controllers_namespace: str = ""
    middlewares_namespace: str = ""

    # URL prefix the application is served under (stripped from request paths)
    base_folder: str = ""
    # Web root removed from base_folder when it is given as a filesystem path
    document_root: str = ""

    # Controller action mapped to the controller prefix itself
    main_method: str = "main"

    # Route cache file (JSON). None disables caching.
    cache: str | Path | None = None

    @classmethod
    def from_mapping(cls, params: Mapping[str, Any]) -> "RouterConfig":
        """Build a config from the nested option mapping.

        Recognized keys: ``debug``, ``paths.controllers``,
        ``paths.middlewares``, ``namespaces.controllers``,
        ``namespaces.middlewares``, ``base_folder``, ``document_root``,
        ``main_method`` and ``cache``. Unknown keys are ignored.
        """
        paths = params.get("paths") or {}
        namespaces = params.get("namespaces") or {}
        defaults = cls()

        debug = params.get("debug", defaults.debug)
        return cls(
            debug=debug if isinstance(debug, bool) else defaults.debug,
            controllers_path=str(paths.get("controllers", defaults.controllers_path)).rstrip("/"),
            middlewares_path=str(paths.get("middlewares", defaults.middlewares_path)).rstrip("/"),
            controllers_namespace=str(namespaces.get("controllers", "")).strip("."),
            middlewares_namespace=str(namespaces.get("middlewares", "")).strip("."),
            base_folder=str(params.get("base_folder", defaults.base_folder)).rstrip("/"),
            document_root=str(params.get("document_root", defaults.document_root)).rstrip("/"),
            main_method=params.get("main_method", defaults.main_method),
            cache=params.get("cache", defaults.cache),
        )
