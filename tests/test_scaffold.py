"""Tests for sitexport.export.scaffold — page and data route synthesis."""

from __future__ import annotations

import pytest

from sitexport.export.scaffold import (
    ApiEndpointConfig,
    collect_api_endpoints,
    method_name_for,
    page_routes,
    parse_endpoint,
    pascal_case,
    sample_kind,
    sample_response,
    synthesize,
    template_name_for,
)
from sitexport.observability import DiagnosticCollector
from sitexport.tree.nodes import SitePage

from .conftest import component, page


def pages(*documents: dict) -> list[SitePage]:
    return [SitePage.from_dict(d) for d in documents]


def api_repeater(instance_id: str, endpoint: str, **source: str) -> dict:
    return component(
        "Repeater", instance_id, category="data",
        dataSource={"type": "api", "endpoint": endpoint, **source},
    )


# ---------------------------------------------------------------------------
# Naming
# ---------------------------------------------------------------------------


class TestNaming:
    def test_pascal_case(self) -> None:
        assert pascal_case("team-members") == "TeamMembers"
        assert pascal_case("blog_posts") == "BlogPosts"
        assert pascal_case("v2!") == "V2"
        assert pascal_case("---") == ""

    @pytest.mark.parametrize(
        ("page_name", "template", "method"),
        [
            ("Home", "home", "home"),
            ("About Us", "about-us", "aboutus"),
            ("404", "404", "page404"),
            ("???", "---", "home"),
            ("New", "new", "pagenew"),
            ("Default", "default", "pagedefault"),
            ("Class", "class", "pageclass"),
            ("Return", "return", "pagereturn"),
        ],
    )
    def test_page_names(self, page_name: str, template: str, method: str) -> None:
        assert template_name_for(page_name) == template
        assert method_name_for(page_name) == method


class TestParseEndpoint:
    def test_two_segments(self) -> None:
        assert parse_endpoint("/api/team/members", "results") == ApiEndpointConfig(
            endpoint="/api/team/members",
            data_path="results",
            controller_name="TeamController",
            method_name="getMembers",
            route_path="/api/team/members",
        )

    def test_absolute_url_and_query(self) -> None:
        config = parse_endpoint("https://api.example.com/api/blog-posts/latest?limit=3")
        assert config.controller_name == "BlogPostsController"
        assert config.method_name == "getLatest"
        assert config.route_path == "/api/blog-posts/latest"
        assert config.data_path == "items"

    def test_short_path_falls_back(self) -> None:
        config = parse_endpoint("/products")
        assert config.controller_name == "DataController"
        assert config.method_name == "getData"
        assert config.route_path == "/products"


# ---------------------------------------------------------------------------
# Data endpoints
# ---------------------------------------------------------------------------


class TestCollectApiEndpoints:
    def test_distinct_endpoints_in_order(self) -> None:
        site = pages(
            page("Home", api_repeater("r1", "/api/products/list"), api_repeater("r2", "/api/team/members")),
            page("Shop", api_repeater("r3", "/api/products/list"), route="/shop"),
        )
        endpoints = collect_api_endpoints(site)
        assert [e.method_name for e in endpoints] == ["getList", "getMembers"]

    def test_page_level_sources_first(self) -> None:
        site = pages(page(
            "Home",
            api_repeater("r1", "/api/team/members"),
            data_context={"dataSources": {"posts": {"type": "api", "endpoint": "/api/blog/posts", "dataPath": "posts"}}},
        ))
        endpoints = collect_api_endpoints(site)
        assert [e.endpoint for e in endpoints] == ["/api/blog/posts", "/api/team/members"]
        assert endpoints[0].data_path == "posts"

    def test_iterator_data_path_used(self) -> None:
        repeater = api_repeater("r1", "/api/team/members")
        repeater["iteratorConfig"] = {"dataPath": "members"}
        [config] = collect_api_endpoints(pages(page("Home", repeater)))
        assert config.data_path == "members"

    def test_handler_name_collision_suffixed(self) -> None:
        collector = DiagnosticCollector()
        site = pages(page(
            "Home",
            api_repeater("r1", "/api/team/members"),
            api_repeater("r2", "/api/club/members"),
            api_repeater("r3", "/api/guild/members"),
        ))
        endpoints = collect_api_endpoints(site, collector=collector)
        assert [e.method_name for e in endpoints] == ["getMembers", "getMembers2", "getMembers3"]
        assert [w.code for w in collector.warnings] == ["duplicate-handler", "duplicate-handler"]

    def test_same_route_served_once(self) -> None:
        collector = DiagnosticCollector()
        site = pages(page(
            "Home",
            api_repeater("r1", "/api/team/members"),
            api_repeater("r2", "https://api.example.com/api/team/members"),
        ))
        endpoints = collect_api_endpoints(site, collector=collector)
        assert len(endpoints) == 1
        assert [w.code for w in collector.warnings] == ["duplicate-route"]

    def test_non_api_sources_ignored(self) -> None:
        site = pages(page("Home", component(
            "Repeater", "r1", category="data", dataSource={"type": "static", "staticData": []},
        )))
        assert collect_api_endpoints(site) == ()


class TestSamples:
    @pytest.mark.parametrize(
        ("method", "kind"),
        [
            ("getProducts", "product"),
            ("getMembers", "team"),
            ("getStaff", "team"),
            ("getArticles", "post"),
            ("getReviews", "testimonial"),
            ("getServices", "service"),
            ("getData", "generic"),
        ],
    )
    def test_sample_kind(self, method: str, kind: str) -> None:
        assert sample_kind(method) == kind

    def test_sample_response_shape(self) -> None:
        body = sample_response(parse_endpoint("/api/team/members", "members"))
        assert list(body) == ["members", "total"]
        assert body["total"] == 2
        assert body["members"][0]["name"] == "John Doe"  # type: ignore[index]

    def test_samples_are_copies(self) -> None:
        config = parse_endpoint("/api/shop/products")
        sample_response(config)["items"][0]["name"] = "changed"  # type: ignore[index]
        assert sample_response(config)["items"][0]["name"] == "Sample Product 1"  # type: ignore[index]


# ---------------------------------------------------------------------------
# Page routes
# ---------------------------------------------------------------------------


class TestPageRoutes:
    def test_home_and_regular_pages(self) -> None:
        routes = page_routes(pages(page("Home"), page("About Us", route="/about/")))
        home, about = routes
        assert home.paths == ("/", "/home")
        assert home.template_path == "src/main/resources/templates/home.html"
        assert about.paths == ("/about",)
        assert about.method_name == "aboutus"
        assert about.data_path == "src/main/resources/pages/about-us.json"

    def test_duplicate_names_suffixed(self) -> None:
        collector = DiagnosticCollector()
        routes = page_routes(
            pages(page("Team", route="/team"), page("Team", route="/team-2")),
            collector=collector,
        )
        assert [r.template_name for r in routes] == ["team", "team-2"]
        assert [r.method_name for r in routes] == ["team", "team2"]
        assert [w.code for w in collector.warnings] == ["duplicate-page"]

    def test_duplicate_route_remapped(self) -> None:
        collector = DiagnosticCollector()
        routes = page_routes(
            pages(page("Blog", route="/news"), page("Posts", route="/news")),
            collector=collector,
        )
        assert routes[0].paths == ("/news",)
        assert routes[1].paths == ("/posts",)
        [warning] = collector.warnings
        assert warning.code == "duplicate-route"
        assert warning.path == "Posts"

    def test_fallback_path_kept_unique(self) -> None:
        routes = page_routes(pages(page("Blog", route="/news"), page("News", route="/news")))
        assert routes[1].paths == ("/news-2",)

    def test_second_home_page(self) -> None:
        routes = page_routes(pages(page("Home"), page("Start", route="/home")))
        assert routes[1].paths == ("/start",)


class TestSynthesize:
    def test_scaffold(self) -> None:
        scaffold = synthesize(pages(
            page("Home", api_repeater("r1", "/api/team/members")),
            page("About", route="/about"),
        ))
        assert [r.template_name for r in scaffold.pages] == ["home", "about"]
        assert scaffold.has_api_endpoints
        assert scaffold.endpoint_for("/api/team/members").method_name == "getMembers"  # type: ignore[union-attr]
        assert scaffold.endpoint_for("http://x.example.com/api/team/members") is not None
        assert scaffold.endpoint_for("/api/other/thing") is None

    def test_no_api(self) -> None:
        assert synthesize(pages(page("Home"))).has_api_endpoints is False

    def test_deterministic(self) -> None:
        site = pages(page("Home", api_repeater("r1", "/api/team/members")), page("Home"))
        assert synthesize(site) == synthesize(site)
