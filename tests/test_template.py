"""Tests for switchyard.routing.template — path template compilation."""

import pytest

from switchyard.errors import ConfigurationError, UriParameterError
from switchyard.routing.template import PathTemplate, non_capturing


class TestNonCapturing:
    def test_plain_group(self) -> None:
        assert non_capturing("(ab|cd)") == "(?:ab|cd)"

    def test_named_group(self) -> None:
        assert non_capturing("(?P<x>\\d+)") == "(?:\\d+)"

    def test_leaves_non_capturing_and_escaped(self) -> None:
        assert non_capturing("(?:a)\\(b\\)") == "(?:a)\\(b\\)"

    def test_leaves_lookarounds(self) -> None:
        assert non_capturing("(?=a)(?!b)") == "(?=a)(?!b)"


class TestCompile:
    def test_trims_slashes(self) -> None:
        assert PathTemplate("/blog/posts/").path == "blog/posts"

    def test_explicit_params_in_order(self) -> None:
        template = PathTemplate("/blog/{id:\\d+}-{slug:[a-z]+}")
        assert template.keys == ("id", "slug")
        assert template.params == {"id": "\\d+", "slug": "[a-z]+"}

    def test_shorthand_gets_default_pattern(self) -> None:
        template = PathTemplate("/user/:name")
        assert template.keys == ("name",)
        assert template.params == {"name": "[^/]+"}

    def test_custom_default_pattern(self) -> None:
        template = PathTemplate("/user/:name", default_pattern="[a-z]+")
        assert template.match("/user/bob") == {"name": "bob"}
        assert template.match("/user/b0b") is None

    def test_mixed_forms_keep_appearance_order(self) -> None:
        template = PathTemplate("/:slug/{id:\\d+}")
        assert template.keys == ("slug", "id")
        assert template.match("/hello/5") == {"slug": "hello", "id": "5"}

    def test_repeated_parameter_raises(self) -> None:
        with pytest.raises(ConfigurationError, match="more than once"):
            PathTemplate("/{id:\\d+}/again/:id")

    def test_static_text_is_literal(self) -> None:
        template = PathTemplate("/file.txt")
        assert template.match("/file.txt") == {}
        assert template.match("/fileXtxt") is None

    def test_capturing_group_in_regex_is_neutralized(self) -> None:
        template = PathTemplate("/lang/{code:(en|fr)}")
        assert template.keys == ("code",)
        assert template.match("/lang/fr") == {"code": "fr"}
        assert "(?:en|fr)" in template.pattern

    def test_prior_binding_wins_over_inline_regex(self) -> None:
        template = PathTemplate("/post/{id:[a-z]+}", bindings={"id": "\\d+"})
        assert template.match("/post/12") == {"id": "12"}
        assert template.match("/post/ab") is None

    def test_invalid_regex_raises(self) -> None:
        with pytest.raises(ConfigurationError, match="invalid regex"):
            PathTemplate("/{id:[a-}")

    def test_group_count_mismatch_raises(self) -> None:
        with pytest.raises(ConfigurationError, match="capture groups"):
            PathTemplate("/:name", default_pattern="(x)+")

    def test_brace_quantifier_in_inline_regex(self) -> None:
        template = PathTemplate("/archive/{year:\\d{4}}/{month:\\d{1,2}}")
        assert template.keys == ("year", "month")
        assert template.match("/archive/2024/3") == {"year": "2024", "month": "3"}
        assert template.match("/archive/24/3") is None
        assert template.generate({"year": 2024, "month": 12}) == "/archive/2024/12"

    @pytest.mark.parametrize("path", ["/{year:\\d{4}", "/{id:a{{1}}}"])
    def test_unterminated_parameter_raises(self, path: str) -> None:
        with pytest.raises(ConfigurationError, match="unterminated or over-nested"):
            PathTemplate(path)


class TestMatch:
    def test_scenario_blog_post(self) -> None:
        template = PathTemplate("/blog/{id:\\d+}-{slug:[a-z]+}")
        assert template.match("/blog/1-slug") == {"id": "1", "slug": "slug"}

    def test_static_template_yields_empty_dict(self) -> None:
        assert PathTemplate("/about").match("/about") == {}

    def test_root(self) -> None:
        assert PathTemplate("/").match("/") == {}
        assert PathTemplate("").match("") == {}

    def test_slashes_ignored_on_input(self) -> None:
        template = PathTemplate("/about")
        assert template.match("about") == {}
        assert template.match("/about/") == {}

    def test_full_match_only(self) -> None:
        template = PathTemplate("/blog/{id:\\d+}")
        assert template.match("/blog/1/extra") is None
        assert template.match("/prefix/blog/1") is None

    def test_default_pattern_stops_at_slash(self) -> None:
        assert PathTemplate("/user/:name").match("/user/a/b") is None

    def test_case_insensitive_by_default(self) -> None:
        assert PathTemplate("/About").match("/ABOUT") == {}

    def test_case_sensitive(self) -> None:
        template = PathTemplate("/About", case_sensitive=True)
        assert template.match("/about") is None
        assert template.match("/About") == {}

    def test_repeatable(self) -> None:
        template = PathTemplate("/user/:name")
        assert template.match("/user/a") == template.match("/user/a")


class TestBind:
    def test_rebind_affects_matching(self) -> None:
        template = PathTemplate("/post/:id")
        assert template.match("/post/abc") == {"id": "abc"}
        template.bind("id", "\\d+")
        assert template.match("/post/abc") is None
        assert template.match("/post/12") == {"id": "12"}

    def test_rebind_overrides_inline_regex(self) -> None:
        template = PathTemplate("/post/{id:[a-z]+}")
        template.bind("id", "\\d+")
        assert template.match("/post/7") == {"id": "7"}

    def test_bind_unused_name_only_records_it(self) -> None:
        template = PathTemplate("/post/:id")
        template.bind("other", "x")
        assert template.keys == ("id",)
        assert template.params["other"] == "x"


class TestGenerate:
    def test_scenario_with_query_string(self) -> None:
        template = PathTemplate("/simple-{id:\\d+}-{slug:[a-z]+}")
        assert template.generate({"id": 1, "slug": "slug", "test": 6}) == "/simple-1-slug?test=6"

    def test_static(self) -> None:
        assert PathTemplate("/about").generate() == "/about"

    def test_root(self) -> None:
        assert PathTemplate("/").generate() == "/"

    def test_fragment(self) -> None:
        assert PathTemplate("/docs/:page").generate({"page": "intro"}, "usage") == (
            "/docs/intro#usage"
        )

    def test_shorthand_values(self) -> None:
        assert PathTemplate("/user/:name").generate({"name": "bob"}) == "/user/bob"

    def test_repeated_query_values(self) -> None:
        uri = PathTemplate("/search").generate({"tag": ["a", "b"]})
        assert uri == "/search?tag=a&tag=b"

    def test_missing_parameter(self) -> None:
        template = PathTemplate("/blog/{id:\\d+}-{slug:[a-z]+}")
        with pytest.raises(UriParameterError) as exc_info:
            template.generate({"id": 1})
        assert exc_info.value.parameter == "slug"
        assert exc_info.value.pattern is None
        assert "Missing route parameter 'slug'" in str(exc_info.value)

    def test_value_not_matching_regex(self) -> None:
        template = PathTemplate("/blog/{id:\\d+}")
        with pytest.raises(UriParameterError) as exc_info:
            template.generate({"id": "abc"})
        err = exc_info.value
        assert err.parameter == "id"
        assert err.value == "abc"
        assert err.pattern == "\\d+"

    def test_regex_must_match_fully(self) -> None:
        with pytest.raises(UriParameterError):
            PathTemplate("/blog/{id:\\d+}").generate({"id": "12a"})

    def test_bound_name_outside_template_not_required(self) -> None:
        template = PathTemplate("/post/:id")
        template.bind("other", "\\d+")
        assert template.generate({"id": 3}) == "/post/3"

    def test_generated_uri_matches(self) -> None:
        template = PathTemplate("/blog/{id:\\d+}-{slug:[a-z]+}")
        uri = template.generate({"id": 42, "slug": "hello"})
        assert template.match(uri) == {"id": "42", "slug": "hello"}
