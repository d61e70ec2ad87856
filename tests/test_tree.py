"""Tests for sprig.routing.tree: route tree matching."""

import pytest

from sprig.builder import RouteBuilder
from sprig.errors import ConfigurationError
from sprig.http.method import Method
from sprig.routing.params import DecodeFailure, ParamType
from sprig.routing.route import Matched, MethodNotAllowed, NotFound
from sprig.routing.tree import RouteTree, split_path


def m1(ctx):
    return ctx


def m2(ctx):
    return ctx


def m3(ctx):
    return ctx


class TestSplitPath:
    def test_root(self) -> None:
        assert split_path("/") == []

    def test_segments(self) -> None:
        assert split_path("/api/v2/users") == ["api", "v2", "users"]

    def test_empty_segments_dropped(self) -> None:
        assert split_path("//users///7/") == ["users", "7"]


class TestBasePath:
    def test_default(self) -> None:
        assert RouteTree().base_path == "/"

    @pytest.mark.parametrize("base", ["", "api", "/api", "api/"])
    def test_rejects_bad_base(self, base: str) -> None:
        with pytest.raises(ConfigurationError):
            RouteTree(base)

    def test_base_path_prefix_consumed(self) -> None:
        b = RouteBuilder("/api/v1/")
        b.path("users").get()
        outcome = b.tree.match("GET", "/api/v1/users")
        assert isinstance(outcome, Matched)
        assert outcome.node is b.cursor

    def test_outside_base_path(self) -> None:
        b = RouteBuilder("/api/")
        b.path("users").get()
        assert isinstance(b.tree.match("GET", "/users"), NotFound)

    def test_base_root_answers(self) -> None:
        b = RouteBuilder("/api/")
        b.get()
        outcome = b.tree.match("GET", "/api")
        assert isinstance(outcome, Matched)
        assert outcome.node is b.tree.root


class TestStaticRoutes:
    def test_root(self) -> None:
        b = RouteBuilder()
        b.get()
        outcome = b.tree.match("GET", "/")
        assert isinstance(outcome, Matched)
        assert outcome.params == {}

    def test_nested(self) -> None:
        b = RouteBuilder()
        b.path("api").path("v2").path("users").get()
        outcome = b.tree.match("GET", "/api/v2/users")
        assert isinstance(outcome, Matched)
        assert outcome.node.pattern == "/api/v2/users"

    def test_landing_node_is_cursor_at_bind_time(self) -> None:
        b = RouteBuilder()
        b.path("users").get()
        bound = b.cursor
        b.path("extra")
        outcome = b.tree.match("GET", "/users")
        assert isinstance(outcome, Matched)
        assert outcome.node is bound

    def test_trailing_slash_ignored(self) -> None:
        b = RouteBuilder()
        b.path("users").get()
        assert isinstance(b.tree.match("GET", "/users/"), Matched)

    def test_unknown_path(self) -> None:
        b = RouteBuilder()
        b.path("users").get()
        outcome = b.tree.match("GET", "/posts")
        assert outcome == NotFound("/posts")

    def test_intermediate_node_without_method_is_not_found(self) -> None:
        b = RouteBuilder()
        b.path("a").path("b").get()
        assert isinstance(b.tree.match("GET", "/a"), NotFound)

    def test_method_bound_mid_tree(self) -> None:
        b = RouteBuilder()
        b.path("a").get().path("b").get()
        assert isinstance(b.tree.match("GET", "/a"), Matched)
        assert isinstance(b.tree.match("GET", "/a/b"), Matched)

    def test_too_long_path(self) -> None:
        b = RouteBuilder()
        b.path("users").get()
        assert isinstance(b.tree.match("GET", "/users/7"), NotFound)


class TestParams:
    def test_string_param(self) -> None:
        b = RouteBuilder()
        b.path("users").param("name").get()
        outcome = b.tree.match("GET", "/users/alice")
        assert isinstance(outcome, Matched)
        assert outcome.params == {"name": "alice"}

    def test_number_param_decoded(self) -> None:
        b = RouteBuilder()
        b.path("users").param("id", ParamType.NUMBER).get()
        outcome = b.tree.match("GET", "/users/42")
        assert isinstance(outcome, Matched)
        assert outcome.params == {"id": 42}

    def test_number_param_rejects_text(self) -> None:
        b = RouteBuilder()
        b.path("users").param("id", ParamType.NUMBER).get()
        outcome = b.tree.match("GET", "/users/abc")
        assert isinstance(outcome, NotFound)
        assert isinstance(outcome.failure, DecodeFailure)
        assert outcome.failure.value == "abc"

    @pytest.mark.parametrize("raw", ["1" * 5000, "1e999"])
    def test_oversized_number_is_not_found(self, raw: str) -> None:
        b = RouteBuilder()
        b.path("users").param("id", ParamType.NUMBER).get()
        outcome = b.tree.match("GET", f"/users/{raw}")
        assert isinstance(outcome, NotFound)
        assert outcome.failure is not None
        assert outcome.failure.reason == "number too large"

    def test_boolean_param(self) -> None:
        b = RouteBuilder()
        b.path("flags").param("on", ParamType.BOOLEAN).get()
        on = b.tree.match("GET", "/flags/true")
        off = b.tree.match("GET", "/flags/false")
        assert isinstance(on, Matched) and on.params == {"on": True}
        assert isinstance(off, Matched) and off.params == {"on": False}
        assert isinstance(b.tree.match("GET", "/flags/TRUE"), NotFound)
        assert isinstance(b.tree.match("GET", "/flags/1"), NotFound)

    def test_multiple_params(self) -> None:
        b = RouteBuilder()
        b.path("users").param("user_id", ParamType.NUMBER).path("posts").param(
            "post_id", ParamType.NUMBER
        ).get()
        outcome = b.tree.match("GET", "/users/1/posts/42")
        assert isinstance(outcome, Matched)
        assert outcome.params == {"user_id": 1, "post_id": 42}


class TestPrecedence:
    def test_literal_beats_param(self) -> None:
        b = RouteBuilder()
        items = b.path("items")
        literal = items.fork().path("42").get().cursor
        param = items.fork().param("id", ParamType.NUMBER).get().cursor

        exact = b.tree.match("GET", "/items/42")
        other = b.tree.match("GET", "/items/43")
        assert isinstance(exact, Matched) and exact.node is literal
        assert exact.params == {}
        assert isinstance(other, Matched) and other.node is param
        assert other.params == {"id": 43}

    def test_dead_end_literal_falls_back_to_param(self) -> None:
        b = RouteBuilder()
        users = b.path("users")
        users.fork().path("me").path("settings").get()
        param = users.fork().param("name").path("profile").get().cursor

        outcome = b.tree.match("GET", "/users/me/profile")
        assert isinstance(outcome, Matched)
        assert outcome.node is param
        assert outcome.params == {"name": "me"}


class TestMethods:
    def test_method_not_allowed(self) -> None:
        b = RouteBuilder()
        b.path("users").get().post()
        outcome = b.tree.match("DELETE", "/users")
        assert isinstance(outcome, MethodNotAllowed)
        assert outcome.allowed == frozenset({Method.GET, Method.POST})
        assert outcome.allow_header == "GET, POST"
        assert outcome.node is b.cursor

    def test_method_is_case_insensitive(self) -> None:
        b = RouteBuilder()
        b.path("users").get()
        outcome = b.tree.match("get", "/users")
        assert isinstance(outcome, Matched)
        assert outcome.method is Method.GET

    def test_unknown_verb(self) -> None:
        b = RouteBuilder()
        b.path("users").get()
        outcome = b.tree.match("TRACE", "/users")
        assert isinstance(outcome, MethodNotAllowed)
        assert outcome.method == "TRACE"

    def test_method_isolation(self) -> None:
        def show(ctx):
            return "show"

        def create(ctx):
            return "create"

        b = RouteBuilder()
        b.path("users").get().handler(show).post().handler(create)
        get = b.tree.match("GET", "/users")
        post = b.tree.match("POST", "/users")
        assert isinstance(get, Matched) and isinstance(post, Matched)
        assert len(get.chain) == 1 and len(post.chain) == 1
        assert get.chain[0] is not post.chain[0]
        assert isinstance(b.tree.match("DELETE", "/users"), MethodNotAllowed)


class TestMiddlewareChain:
    def test_ancestor_before_descendant(self) -> None:
        b = RouteBuilder()
        b.path("a").use(m1).path("b").use(m2).get()
        outcome = b.tree.match("GET", "/a/b")
        assert isinstance(outcome, Matched)
        assert outcome.chain == (m1, m2)

    def test_root_middleware_first(self) -> None:
        b = RouteBuilder()
        b.use(m1).path("a").use(m2).get()
        outcome = b.tree.match("GET", "/a")
        assert isinstance(outcome, Matched)
        assert outcome.chain == (m1, m2)

    def test_sibling_middleware_excluded(self) -> None:
        b = RouteBuilder()
        b.fork().path("a").use(m1).get()
        b.fork().path("b").use(m2).get()
        outcome = b.tree.match("GET", "/b")
        assert isinstance(outcome, Matched)
        assert outcome.chain == (m2,)

    def test_method_chain_after_shared(self) -> None:
        b = RouteBuilder()
        b.path("a").use(m1).get().handler(m2)
        b.use(m3)
        outcome = b.tree.match("GET", "/a")
        assert isinstance(outcome, Matched)
        assert outcome.chain[:2] == (m1, m3)
        assert len(outcome.chain) == 3

    def test_ancestor_method_chain_not_inherited(self) -> None:
        b = RouteBuilder()
        b.path("a").get().handler(m1).path("b").get()
        outcome = b.tree.match("GET", "/a/b")
        assert isinstance(outcome, Matched)
        assert outcome.chain == ()


class TestIdempotence:
    def test_repeated_match_equal(self) -> None:
        b = RouteBuilder()
        b.path("users").use(m1).param("id", ParamType.NUMBER).get().handler(m2)
        b.tree.freeze()
        for path in ("/users/7", "/users/x", "/nope"):
            assert b.tree.match("GET", path) == b.tree.match("GET", path)
        assert b.tree.match("POST", "/users/7") == b.tree.match("POST", "/users/7")


class TestFreeze:
    def test_frozen_tree_rejects_mutation(self) -> None:
        b = RouteBuilder()
        b.tree.freeze()
        assert b.tree.frozen
        with pytest.raises(ConfigurationError):
            b.path("users")
        with pytest.raises(ConfigurationError):
            b.get()
        with pytest.raises(ConfigurationError):
            b.use(m1)

    def test_match_works_after_freeze(self) -> None:
        b = RouteBuilder()
        b.path("users").get()
        b.tree.freeze()
        assert isinstance(b.tree.match("GET", "/users"), Matched)


class TestIntrospection:
    def test_routes(self) -> None:
        b = RouteBuilder()
        b.fork().path("users").get().post()
        b.fork().path("users").param("id", ParamType.NUMBER).delete()
        b.fork().path("health").get()
        assert b.tree.routes() == [
            ("/users", (Method.GET, Method.POST)),
            ("/users/{id:NUMBER}", (Method.DELETE,)),
            ("/health", (Method.GET,)),
        ]
