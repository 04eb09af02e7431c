"""Controller and middleware loading.

String references in route tables (``"UserController@show"``,
``"admin.Reports@daily"``, ``"AuthMiddleware"``) are resolved to Python
objects here, and controller classes are described as a list of actions
for ``Router.controller()``. The router core never introspects classes
itself; it only consumes ``ActionDescriptor`` values.
"""

import importlib
import importlib.util
import inspect
import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from types import ModuleType
from typing import Any

from waypoint.errors import ConfigurationError

logger = logging.getLogger("waypoint.loading")

SCALAR_TYPES: dict[Any, str] = {
    int: "int",
    float: "float",
    str: "str",
    bool: "bool",
    "int": "int",
    "float": "float",
    "str": "str",
    "bool": "bool",
}


@dataclass(frozen=True, slots=True)
class ParamDescriptor:
    """One formal parameter of a controller action.

    ``type`` is ``"int"``, ``"float"``, ``"str"`` or ``"bool"`` for scalar
    annotations and ``None`` for anything else (including no annotation).
    """

    name: str
    type: str | None = None
    optional: bool = False


@dataclass(frozen=True, slots=True)
class ActionDescriptor:
    """A public controller action: its name and its parameters in order."""

    name: str
    params: tuple[ParamDescriptor, ...] = ()


def _scalar_type(annotation: Any) -> str | None:
    if annotation is inspect.Parameter.empty:
        return None
    try:
        return SCALAR_TYPES.get(annotation)
    except TypeError:  # unhashable annotation objects
        return None


def _signature(func: Callable[..., Any]) -> inspect.Signature:
    try:
        return inspect.signature(func, eval_str=True)
    except NameError:
        # Forward references that cannot be evaluated here
        return inspect.signature(func)


def describe_action(name: str, func: Callable[..., Any]) -> ActionDescriptor:
    """Describe a single controller method (``self`` excluded)."""
    params: list[ParamDescriptor] = []
    for index, param in enumerate(_signature(func).parameters.values()):
        if index == 0 and param.name in ("self", "cls"):
            continue
        if param.kind in (param.VAR_POSITIONAL, param.VAR_KEYWORD, param.KEYWORD_ONLY):
            continue
        params.append(
            ParamDescriptor(
                name=param.name,
                type=_scalar_type(param.annotation),
                optional=param.default is not param.empty,
            )
        )
    return ActionDescriptor(name=name, params=tuple(params))


def describe_actions(controller: type) -> tuple[ActionDescriptor, ...]:
    """List the public actions of *controller* in declaration order.

    Methods defined on subclasses come before inherited ones. Names
    starting with an underscore (constructors, dunders, helpers) are
    not actions.
    """
    seen: set[str] = set()
    actions: list[ActionDescriptor] = []
    for klass in controller.__mro__:
        if klass is object:
            continue
        for name, member in vars(klass).items():
            if name in seen or name.startswith("_") or not inspect.isfunction(member):
                continue
            seen.add(name)
            actions.append(describe_action(name, member))
    return tuple(actions)


class ReferenceLoader:
    """Resolve dotted class references for one kind of object.

    Lookup order for ``"admin.UserController"``:

    1. ``<namespace>.admin`` module, attribute ``UserController``
       (``<namespace>`` itself for bare names)
    2. ``admin`` module imported as an absolute path
    3. ``<path>/admin/UserController.py`` or ``<path>/admin.py`` loaded
       from the filesystem

    Resolved objects are cached for the lifetime of the loader. Loading is
    serialized so concurrent first lookups import a file module only once.
    """

    __slots__ = ("_cache", "_lock", "kind", "namespace", "path")

    def __init__(self, path: str | Path, namespace: str = "", kind: str = "controller") -> None:
        self.path = Path(path)
        self.namespace = namespace.strip(".")
        self.kind = kind
        self._cache: dict[str, Any] = {}
        self._lock = threading.Lock()

    def load(self, reference: str) -> Any:
        """Return the object named by *reference*.

        Raises ``ConfigurationError`` if it cannot be found.
        """
        cached = self._cache.get(reference)
        if cached is not None:
            return cached

        with self._lock:
            cached = self._cache.get(reference)
            if cached is None:
                cached = self._resolve(reference)
                self._cache[reference] = cached
        return cached

    def _resolve(self, reference: str) -> Any:
        relative = self.strip_namespace(reference.replace("/", ".").replace("\\", "."))
        module_part, _, attr = relative.rpartition(".")

        for module in self._candidate_modules(module_part):
            found = self._from_module(module, attr)
            if found is not None:
                return found

        found = self._from_file(relative, module_part, attr)
        if found is None:
            msg = f"{relative} class is not found! Please check the file."
            raise ConfigurationError(msg)
        return found

    def strip_namespace(self, reference: str) -> str:
        if self.namespace and reference.startswith(f"{self.namespace}."):
            return reference[len(self.namespace) + 1 :]
        return reference

    def _candidate_modules(self, module_part: str) -> list[str]:
        candidates: list[str] = []
        if self.namespace:
            candidates.append(f"{self.namespace}.{module_part}" if module_part else self.namespace)
        if module_part:
            candidates.append(module_part)
        return candidates

    @staticmethod
    def _from_module(module_name: str, attr: str) -> Any:
        try:
            module = importlib.import_module(module_name)
        except ModuleNotFoundError as exc:
            # Only swallow "this candidate does not exist", not broken imports inside it
            if exc.name and (module_name == exc.name or module_name.startswith(f"{exc.name}.")):
                return None
            raise
        return getattr(module, attr, None)

    def _from_file(self, relative: str, module_part: str, attr: str) -> Any:
        candidates = [self.path / (relative.replace(".", "/") + ".py")]
        if module_part:
            candidates.append(self.path / (module_part.replace(".", "/") + ".py"))

        for file in candidates:
            if not file.is_file():
                continue
            module = self._load_file(file)
            found = getattr(module, attr, None)
            if found is not None:
                return found
        return None

    def _load_file(self, file: Path) -> ModuleType:
        module_name = f"_waypoint_{self.kind}s." + ".".join(file.with_suffix("").parts[-2:])
        spec = importlib.util.spec_from_file_location(module_name, file)
        if spec is None or spec.loader is None:
            msg = f"Cannot load {self.kind} file {file}"
            raise ConfigurationError(msg)
        module = importlib.util.module_from_spec(spec)
        spec.loader.exec_module(module)
        logger.debug("Loaded %s module from %s", self.kind, file)
        return module
