"""Path template compiler.

A template mixes static text with two parameter forms::

    /post/{id:\\d+}-{slug:[a-z]+}    explicit inline regex
    /post/:id-:slug                  shorthand, regex from a prior binding
                                     or the default ``[^/]+``

Compilation runs two passes over the slash-trimmed template. Pass one
rewrites every ``{name:regex}`` to ``:name`` and binds ``name -> regex``
unless the name is already bound. An inline regex may use brace
quantifiers such as ``\\d{4}``; deeper brace nesting is rejected. Pass two
turns every ``:name`` into a capturing group, in order of appearance, which
fixes the matched-key order.

Bound regexes never contribute capture groups of their own: capturing
``(`` (and named groups) are rewritten to ``(?:``. The compiled matcher
is checked to hold exactly one group per matched key.
"""

import re
from collections.abc import Mapping
from typing import Any
from urllib.parse import urlencode

from switchyard.errors import ConfigurationError, UriParameterError

# The inline regex may hold one level of braces, as in "{year:\d{4}}"
_EXPLICIT_PARAM = re.compile(r"\{(\w+):((?:[^{}]|\{[^{}]*\})*)\}")
_UNTERMINATED_PARAM = re.compile(r"\{\w+:")
_SHORTHAND_PARAM = re.compile(r":(\w+)")

# An unescaped "(" that opens a capturing group, plain or named
_CAPTURING_GROUP = re.compile(r"(?<!\\)\((?:\?P<\w+>)?(?!\?)")


def non_capturing(regex: str) -> str:
    """Rewrite every capturing group in *regex* as non-capturing.

    ``([a-z]+)`` becomes ``(?:[a-z]+)``; ``(?:...)``, lookarounds and
    escaped parentheses are left alone.
    """
    return _CAPTURING_GROUP.sub("(?:", regex)


class PathTemplate:
    """A compiled path template.

    Usage::

        template = PathTemplate("/post/{id:\\d+}-{slug:[a-z]+}")
        template.match("/post/1-hello")       # {"id": "1", "slug": "hello"}
        template.generate({"id": 1, "slug": "hello"})   # "/post/1-hello"
    """

    __slots__ = (
        "_default_pattern",
        "_flags",
        "_keys",
        "_matcher",
        "_params",
        "_shorthand",
        "path",
    )

    def __init__(
        self,
        path: str,
        *,
        default_pattern: str = r"[^/]+",
        case_sensitive: bool = False,
        bindings: Mapping[str, str] | None = None,
    ) -> None:
        self.path = path.strip("/")
        self._default_pattern = default_pattern
        self._flags = 0 if case_sensitive else re.IGNORECASE
        self._params: dict[str, str] = {}
        for name, regex in (bindings or {}).items():
            self._params[name] = non_capturing(regex)
        self._compile()

    # -- Compilation --

    def _compile(self) -> None:
        self._shorthand = _EXPLICIT_PARAM.sub(self._bind_explicit, self.path)
        leftover = _UNTERMINATED_PARAM.search(self._shorthand)
        if leftover is not None:
            msg = (
                f"Route path {self.path!r} has an unterminated or over-nested "
                f"parameter at {leftover.group()!r}"
            )
            raise ConfigurationError(msg)

        keys: list[str] = []
        parts: list[str] = []
        position = 0
        for token in _SHORTHAND_PARAM.finditer(self._shorthand):
            name = token.group(1)
            if name in keys:
                msg = f"Route path {self.path!r} declares parameter {name!r} more than once"
                raise ConfigurationError(msg)
            parts.append(re.escape(self._shorthand[position : token.start()]))
            parts.append(f"({self._params.setdefault(name, self._default_pattern)})")
            keys.append(name)
            position = token.end()
        parts.append(re.escape(self._shorthand[position:]))

        source = "".join(parts)
        try:
            matcher = re.compile(source, self._flags)
        except re.error as exc:
            msg = f"Route path {self.path!r} compiles to an invalid regex {source!r}: {exc}"
            raise ConfigurationError(msg) from exc
        if matcher.groups != len(keys):
            msg = (
                f"Route path {self.path!r} declares parameters {keys} "
                f"but compiles to {matcher.groups} capture groups"
            )
            raise ConfigurationError(msg)

        self._matcher = matcher
        self._keys = tuple(keys)

    def _bind_explicit(self, token: re.Match[str]) -> str:
        name, regex = token.group(1), token.group(2)
        if name not in self._params:
            self._params[name] = non_capturing(regex)
        return f":{name}"

    def bind(self, name: str, regex: str) -> None:
        """Bind (or rebind) parameter *name* to *regex* and recompile."""
        self._params[name] = non_capturing(regex)
        self._compile()

    # -- Introspection --

    @property
    def keys(self) -> tuple[str, ...]:
        """Matched-key order, aligned 1:1 with the matcher's capture groups."""
        return self._keys

    @property
    def params(self) -> dict[str, str]:
        """Bound parameter regexes, in binding order."""
        return dict(self._params)

    @property
    def pattern(self) -> str:
        """Source of the compiled matcher."""
        return self._matcher.pattern

    # -- Matching --

    def match(self, url: str) -> dict[str, str] | None:
        """Return the matched attributes for *url*, or ``None``.

        Leading and trailing slashes are ignored on both sides.
        """
        found = self._matcher.fullmatch(url.strip("/"))
        if found is None:
            return None
        return dict(zip(self._keys, found.groups(), strict=True))

    # -- Generation --

    def generate(
        self,
        params: Mapping[str, Any] | None = None,
        fragment: str | None = None,
    ) -> str:
        """Build a concrete URI from parameter values.

        Every parameter in the template needs a value that fully matches
        its bound regex. Values for names that aren't path parameters are
        appended as a query string.
        """
        remaining = dict(params or {})
        values: dict[str, str] = {}
        for name, regex in self._params.items():
            if name not in self._keys:
                continue
            if name not in remaining:
                raise UriParameterError(name)
            value = str(remaining.pop(name))
            if re.fullmatch(regex, value, self._flags) is None:
                raise UriParameterError(name, value=value, pattern=regex)
            values[name] = value

        path = _SHORTHAND_PARAM.sub(lambda token: values[token.group(1)], self._shorthand)
        if remaining:
            path = f"{path}?{urlencode(remaining, doseq=True)}"
        if not path.startswith("/"):
            path = f"/{path}"
        if fragment:
            path = f"{path}#{fragment}"
        return path

    def __repr__(self) -> str:
        return f"PathTemplate({self.path!r}, keys={self._keys!r})"
