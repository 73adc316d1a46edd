"""Tests for switchyard.routing.handlers — handler spec normalization and lookup."""

import pytest

from sample_controllers import (
    ActionController,
    Mailer,
    NeedsMailerController,
    ServiceContainer,
)
from switchyard.errors import ConfigurationError, MissingContainer, TargetNotFound
from switchyard.routing.handlers import (
    ClassAction,
    InlineFunction,
    bind_action,
    instantiate,
    load_controller,
    normalize_handler,
)


def _home() -> str:
    return "home"


class TestNormalizeHandler:
    def test_function(self) -> None:
        assert normalize_handler(_home, "home") == InlineFunction(_home)

    def test_class(self) -> None:
        assert normalize_handler(ActionController, "r") == ClassAction(ActionController)

    def test_class_defaults_to_call(self) -> None:
        assert normalize_handler(ActionController, "r").action == "__call__"

    @pytest.mark.parametrize("spec", ["Posts@show", "Posts#show"])
    def test_string_with_action(self, spec: str) -> None:
        assert normalize_handler(spec, "r") == ClassAction("Posts", "show")

    def test_string_without_action(self) -> None:
        assert normalize_handler("Posts", "r") == ClassAction("Posts", "__call__")

    def test_dotted_string(self) -> None:
        handler = normalize_handler("app.controllers.Posts@show", "r")
        assert handler == ClassAction("app.controllers.Posts", "show")

    def test_pair(self) -> None:
        handler = normalize_handler((ActionController, "action"), "r")
        assert handler == ClassAction(ActionController, "action")

    def test_mapping(self) -> None:
        handler = normalize_handler({"controller": ActionController, "action": "action"}, "r")
        assert handler == ClassAction(ActionController, "action")

    def test_mapping_without_action(self) -> None:
        handler = normalize_handler({"controller": "Posts"}, "r")
        assert handler == ClassAction("Posts", "__call__")

    @pytest.mark.parametrize("spec", ["", (), [], {}])
    def test_empty(self, spec: object) -> None:
        with pytest.raises(ConfigurationError, match="home callback argument must not be empty"):
            normalize_handler(spec, "home")

    def test_empty_controller(self) -> None:
        with pytest.raises(ConfigurationError, match="controller argument must not be empty"):
            normalize_handler("@show", "r")

    def test_empty_action(self) -> None:
        with pytest.raises(ConfigurationError, match="action argument must not be empty"):
            normalize_handler("Posts@", "r")

    def test_wrong_pair_length(self) -> None:
        with pytest.raises(ConfigurationError, match="pair"):
            normalize_handler((ActionController, "action", "extra"), "r")

    def test_not_callable(self) -> None:
        with pytest.raises(ConfigurationError):
            normalize_handler(42, "r")


class TestClassAction:
    def test_describe_class(self) -> None:
        assert ClassAction(ActionController, "action").describe() == "ActionController.action"

    def test_describe_string(self) -> None:
        assert ClassAction("Posts", "show").controller_name == "Posts"


class TestLoadController:
    def test_class_returned_as_is(self) -> None:
        assert load_controller(ActionController) is ActionController

    def test_dotted_name(self) -> None:
        assert load_controller("sample_controllers.ActionController") is ActionController

    def test_namespace(self) -> None:
        assert load_controller("ActionController", "sample_controllers") is ActionController

    def test_missing_module(self) -> None:
        with pytest.raises(TargetNotFound, match="does not exist"):
            load_controller("no_such_module.Posts")

    def test_missing_class(self) -> None:
        with pytest.raises(TargetNotFound, match="'sample_controllers.Missing'"):
            load_controller("Missing", "sample_controllers")

    def test_bare_name_without_namespace(self) -> None:
        with pytest.raises(TargetNotFound):
            load_controller("ActionController")


class TestInstantiate:
    def test_zero_argument_constructor(self) -> None:
        assert isinstance(instantiate(ActionController, None), ActionController)

    def test_zero_argument_constructor_ignores_container(self) -> None:
        container = ServiceContainer()
        instantiate(ActionController, container)
        assert container.requested == []

    def test_needs_container(self) -> None:
        with pytest.raises(MissingContainer) as exc_info:
            instantiate(NeedsMailerController, None)
        assert exc_info.value.dependency == "NeedsMailerController"

    def test_from_container(self) -> None:
        controller = NeedsMailerController(Mailer("ops"))
        container = ServiceContainer({NeedsMailerController: controller})
        assert instantiate(NeedsMailerController, container) is controller

    def test_container_without_entry(self) -> None:
        with pytest.raises(TargetNotFound, match="can not be resolved"):
            instantiate(NeedsMailerController, ServiceContainer())


class TestBindAction:
    def test_bound_method(self) -> None:
        method = bind_action(ActionController(), "action")
        assert method("slug") == "slug"

    def test_missing_method(self) -> None:
        with pytest.raises(TargetNotFound, match="'nope' does not exist in class 'ActionController'"):
            bind_action(ActionController(), "nope")
