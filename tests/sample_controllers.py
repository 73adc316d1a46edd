"""Controllers, policies, middleware, and a container used by the routing tests.

Importable by name so string handler specs ("sample_controllers.X@y")
can be exercised.
"""

from typing import Any

from switchyard.http.request import Request
from switchyard.http.response import Redirect, Response
from switchyard.routing.policy import Policy


class ServiceContainer:
    """Dict-backed container satisfying ``switchyard.contracts.Container``."""

    def __init__(self, entries: dict[Any, Any] | None = None) -> None:
        self.entries: dict[Any, Any] = dict(entries or {})
        self.requested: list[Any] = []

    def set(self, key: Any, value: Any) -> "ServiceContainer":
        self.entries[key] = value
        return self

    def has(self, key: Any) -> bool:
        return key in self.entries

    def get(self, key: Any) -> Any:
        self.requested.append(key)
        return self.entries[key]


class Mailer:
    def __init__(self, sender: str) -> None:
        self.sender = sender


class ActionController:
    def action(self, slug: str) -> str:
        return slug

    def mail(self, request: Request, mailer: Mailer) -> str:
        return mailer.sender

    def untyped(self, slug) -> str:  # noqa: ANN001
        return slug


class InvokableController:
    def __call__(self) -> str:
        return "invoked"


class ParamsController:
    def __call__(self, request: Request, id: int, slug: str) -> list[Any]:
        return [id, slug, request.get_attribute("_route").name]


class NeedsMailerController:
    def __init__(self, mailer: Mailer) -> None:
        self.mailer = mailer

    def __call__(self) -> str:
        return f"sent by {self.mailer.sender}"

    def by_name(self, class_name: str) -> str:
        return class_name


class QueryPolicy(Policy):
    def __call__(self, request: Request) -> bool:
        return request.query.get("allow") == "1"

    def check(self) -> bool:
        return True

    def deny(self) -> bool:
        return False


class NotAPolicy:
    def __call__(self) -> bool:
        return True


class RedirectMiddleware:
    def process(self, request: Request, next: Any) -> Response:
        return Response(body="").with_status(301).with_header("Location", "/login")


class TagMiddleware:
    async def process(self, request: Request, next: Any) -> Any:
        response = await next(request.with_attribute("tag", "tagged"))
        return response.with_header("X-Tag", "1")


class GreetingMiddleware:
    def __call__(self, request: Request, next: Any) -> str:
        return "Hello"


class LoginRedirect:
    def __call__(self, request: Request, next: Any) -> Redirect:
        return Redirect("/login", status=302)


class NotMiddleware:
    def handle(self) -> None:
        return None
