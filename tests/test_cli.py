"""Tests for waypoint.cli — argument parsing, route listing and caching."""

import sys
import textwrap
from pathlib import Path

import pytest

from waypoint.cli import main
from waypoint.cli._resolve import resolve_router
from waypoint.routing.router import Router


@pytest.fixture
def app_module(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> str:
    """Write an importable module exposing ``router`` and ``make_router``."""
    name = f"waypoint_cli_app_{tmp_path.name.replace('-', '_')}"
    cache_file = tmp_path / "routes.json"
    (tmp_path / f"{name}.py").write_text(
        textwrap.dedent(
            f"""
            from waypoint.config import RouterConfig
            from waypoint.routing.router import Router

            router = Router(RouterConfig(cache={str(cache_file)!r}))
            router.get("/", "HomeController@main", name="home")
            router.get("/users/:id", "UserController@show")

            closures = Router(RouterConfig(cache={str(cache_file)!r}))
            closures.get("/", lambda: "closure")

            uncached = Router()

            not_a_router = 42

            def make_router():
                return Router()
            """
        )
    )
    monkeypatch.syspath_prepend(str(tmp_path))
    yield name
    sys.modules.pop(name, None)


class TestCLIHelp:
    def test_help_exits_zero(self) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["--help"])
        assert exc_info.value.code == 0

    def test_routes_missing_router(self) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["routes"])
        assert exc_info.value.code == 2

    def test_no_command_exits_zero(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main([])
        assert exc_info.value.code == 0
        assert "routes" in capsys.readouterr().out


class TestResolveRouter:
    def test_attribute(self, app_module: str) -> None:
        assert isinstance(resolve_router(f"{app_module}:router"), Router)

    def test_default_attribute(self, app_module: str) -> None:
        assert len(resolve_router(app_module)) == 2

    def test_factory(self, app_module: str) -> None:
        assert isinstance(resolve_router(f"{app_module}:make_router"), Router)

    def test_wrong_type(self, app_module: str) -> None:
        with pytest.raises(TypeError, match="not a waypoint.Router"):
            resolve_router(f"{app_module}:not_a_router")


class TestRoutesCommand:
    def test_lists_routes_newest_first(
        self, app_module: str, capsys: pytest.CaptureFixture[str]
    ) -> None:
        main(["routes", f"{app_module}:router"])
        lines = capsys.readouterr().out.splitlines()
        assert lines[0].split() == ["METHOD", "PATH", "HANDLER"]
        assert "/users/:id" in lines[2]
        assert "UserController@show (usercontroller.show)" in lines[2]
        assert "HomeController@main (home)" in lines[3]

    def test_empty(self, app_module: str, capsys: pytest.CaptureFixture[str]) -> None:
        main(["routes", f"{app_module}:uncached"])
        assert "No routes registered." in capsys.readouterr().out

    def test_bad_import(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["routes", "waypoint_no_such_module:router"])
        assert exc_info.value.code == 1
        assert "Error" in capsys.readouterr().err


class TestCacheCommand:
    def test_writes_and_clears(
        self, app_module: str, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        main(["cache", f"{app_module}:router"])
        assert (tmp_path / "routes.json").is_file()
        assert "Wrote 2 routes" in capsys.readouterr().out

        main(["cache", f"{app_module}:router", "--clear"])
        assert not (tmp_path / "routes.json").exists()

    def test_closure_routes_fail(
        self, app_module: str, capsys: pytest.CaptureFixture[str]
    ) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["cache", f"{app_module}:closures"])
        assert exc_info.value.code == 1
        assert "Closure/Function" in capsys.readouterr().err

    def test_no_cache_configured(
        self, app_module: str, capsys: pytest.CaptureFixture[str]
    ) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["cache", f"{app_module}:uncached"])
        assert exc_info.value.code == 1
