"""Tests for waypoint.routing.table — registration, expansion, groups, controllers."""

import pytest

from waypoint.errors import ConfigurationError
from waypoint.loading import ActionDescriptor, ParamDescriptor
from waypoint.routing.patterns import PatternRegistry
from waypoint.routing.table import RouteTable, action_route, expand_optional


def _handler() -> str:
    return "ok"


class TestExpandOptional:
    def test_no_optional(self) -> None:
        assert expand_optional("/a/:id") == ["/a/:id"]

    def test_two_optional(self) -> None:
        assert expand_optional("/a/b?/c?") == ["/a", "/a/b", "/a/b/c"]

    def test_optional_placeholder(self) -> None:
        assert expand_optional("/users/:id?") == ["/users", "/users/:id"]

    def test_leading_optional(self) -> None:
        assert expand_optional("/:lang?") == ["/", "/:lang"]


class TestActionRoute:
    def test_method_prefix(self) -> None:
        assert action_route("getUserProfile") == ("GET", "user-profile")

    def test_underscore_style(self) -> None:
        assert action_route("post_comment") == ("POST", "comment")

    def test_no_prefix_is_any(self) -> None:
        assert action_route("archive") == ("ANY", "archive")

    def test_x_prefix(self) -> None:
        assert action_route("xpatchSettings") == ("XPATCH", "settings")


class TestRegister:
    def test_newest_first(self) -> None:
        table = RouteTable()
        table.register("GET", "/first", _handler)
        table.register("GET", "/second", _handler)
        assert [r.path for r in table.list()] == ["/second", "/first"]

    def test_one_record_per_method(self) -> None:
        table = RouteTable()
        table.register("GET|POST", "/form", _handler)
        assert sorted(r.method for r in table) == ["GET", "POST"]
        assert len(table) == 2

    def test_optional_expansion_registers_each_arity(self) -> None:
        table = RouteTable()
        added = table.register("GET", "/a/b?/c?", _handler)
        assert [r.path for r in added] == ["/a", "/a/b", "/a/b/c"]
        assert [r.path for r in table.list()] == ["/a/b/c", "/a/b", "/a"]

    def test_path_normalized(self) -> None:
        table = RouteTable()
        table.register("GET", "users//list/", _handler)
        assert table.list()[0].path == "/users/list"

    def test_invalid_method_raises(self) -> None:
        with pytest.raises(ConfigurationError):
            RouteTable().register("FETCH", "/", _handler)

    def test_string_callback_name_derived(self) -> None:
        table = RouteTable(controllers_namespace="app.controllers")
        table.register("GET", "/u", "app.controllers.UserController@show")
        assert table.list()[0].name == "usercontroller.show"

    def test_explicit_name_wins(self) -> None:
        table = RouteTable()
        table.register("GET", "/u", "UserController@show", name="user.show")
        assert table.find("user.show") is not None

    def test_callable_has_no_derived_name(self) -> None:
        table = RouteTable()
        table.register("GET", "/u", _handler)
        assert table.list()[0].name is None


class TestGroups:
    def test_prefix_and_middleware_composition(self) -> None:
        table = RouteTable()
        with table.group("/api", before="A"):
            table.register("GET", "/ping", _handler, before="B")
        route = table.list()[0]
        assert route.path == "/api/ping"
        assert route.before == ("A", "B")
        assert route.groups == ("api",)

    def test_nested_groups_outer_first(self) -> None:
        table = RouteTable()
        with table.group("/api", before=["A"], after="Z"), table.group("v1", before="B"):
            table.register("GET", "/users", _handler, before="C", after="Y")
        route = table.list()[0]
        assert route.path == "/api/v1/users"
        assert route.before == ("A", "B", "C")
        assert route.after == ("Z", "Y")
        assert route.groups == ("api", "v1")

    def test_frame_popped_after_error(self) -> None:
        table = RouteTable()
        with pytest.raises(RuntimeError), table.group("/admin", before="auth"):
            raise RuntimeError("boom")
        table.register("GET", "/after", _handler)
        route = table.list()[0]
        assert route.path == "/after"
        assert route.before == ()
        assert route.groups == ()

    def test_group_prefix_only_applies_inside(self) -> None:
        table = RouteTable()
        with table.group("/api"):
            table.register("GET", "/inner", _handler)
        table.register("GET", "/outer", _handler)
        assert [r.path for r in table.list()] == ["/outer", "/api/inner"]


class TestController:
    def _register(self, table: RouteTable, actions: list[ActionDescriptor], **kwargs: object):
        patterns = PatternRegistry()
        return table.register_controller(
            "/users",
            "UserController",
            actions,
            main_method="main",
            has_pattern=patterns.__contains__,
            **kwargs,
        )

    def test_actions_become_routes(self) -> None:
        table = RouteTable()
        self._register(
            table,
            [
                ActionDescriptor("main"),
                ActionDescriptor("getProfile", (ParamDescriptor("user_id", "int"),)),
                ActionDescriptor("postAvatar", (ParamDescriptor("name", "str"),)),
            ],
        )
        records = {(r.method, r.path): r.callback for r in table}
        assert records[("ANY", "/users")] == "UserController@main"
        assert records[("GET", "/users/profile/:int")] == "UserController@getProfile"
        assert records[("POST", "/users/avatar/:string")] == "UserController@postAvatar"

    def test_untyped_param_uses_any(self) -> None:
        table = RouteTable()
        self._register(table, [ActionDescriptor("getShow", (ParamDescriptor("slug"),))])
        assert table.list()[0].path == "/users/show/:any"

    def test_optional_param_expands(self) -> None:
        table = RouteTable()
        self._register(
            table, [ActionDescriptor("getPage", (ParamDescriptor("n", "int", optional=True),))]
        )
        assert sorted(r.path for r in table) == ["/users/page", "/users/page/:int"]

    def test_only_and_exclude(self) -> None:
        actions = [ActionDescriptor("getA"), ActionDescriptor("getB"), ActionDescriptor("getC")]
        table = RouteTable()
        self._register(table, actions, only=["a", "b"], exclude=["b"])
        assert [r.path for r in table] == ["/users/a"]

    def test_controller_middleware_applies(self) -> None:
        table = RouteTable()
        self._register(table, [ActionDescriptor("getA")], before="auth")
        assert table.list()[0].before == ("auth",)


class TestLoad:
    def test_load_makes_table_read_only(self) -> None:
        source = RouteTable()
        source.register("GET", "/cached", "Home@main")
        table = RouteTable()
        table.load(source.list())
        assert table.loaded
        assert table.register("GET", "/ignored", _handler) == []
        with table.group("/g"):
            table.register("GET", "/also-ignored", _handler)
        assert [r.path for r in table] == ["/cached"]
