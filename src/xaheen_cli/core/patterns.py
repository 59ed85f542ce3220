"""Route pattern parsing.

A route pattern is a sequence of literal command words followed by
parameter placeholders::

    project create <name>          required parameter
    help [topic]                   optional parameter
    registry add <components...>   variadic parameter (one or more)

Literal words always precede placeholders; a literal following a
placeholder is rejected.
"""

from __future__ import annotations

from dataclasses import dataclass

_VARIADIC_SUFFIX = "..."


@dataclass(frozen=True, slots=True)
class Parameter:
    """One positional placeholder of a route pattern."""

    name: str
    required: bool
    variadic: bool

    @property
    def dest(self) -> str:
        """Python identifier used as the argparse destination."""
        return self.name.replace("-", "_")


@dataclass(frozen=True, slots=True)
class RoutePattern:
    """Structured view of a pattern string."""

    words: tuple[str, ...]
    parameters: tuple[Parameter, ...]

    @property
    def verb(self) -> str:
        """Top-level command name (first literal word)."""
        return self.words[0] if self.words else ""


def has_placeholders(pattern: str) -> bool:
    """Return ``True`` when *pattern* contains any ``<…>`` or ``[…]`` marker."""
    return "<" in pattern or "[" in pattern


def _parse_parameter(token: str) -> Parameter | None:
    if token.startswith("<") and token.endswith(">"):
        required = True
    elif token.startswith("[") and token.endswith("]"):
        required = False
    else:
        return None

    name = token[1:-1]
    variadic = name.endswith(_VARIADIC_SUFFIX)
    if variadic:
        name = name[: -len(_VARIADIC_SUFFIX)]
    if not name:
        raise ValueError(f"Empty parameter placeholder {token!r}")
    return Parameter(name=name, required=required, variadic=variadic)


def parse_pattern(pattern: str) -> RoutePattern:
    """Split *pattern* into literal words and parameters.

    Raises
    ------
    ValueError
        If the pattern is empty, has a literal word after a parameter,
        or declares a parameter after a variadic one.
    """
    tokens = pattern.split()
    if not tokens:
        raise ValueError("Route pattern must not be empty")

    words: list[str] = []
    parameters: list[Parameter] = []
    for token in tokens:
        parameter = _parse_parameter(token)
        if parameter is None:
            if parameters:
                raise ValueError(
                    f"Literal word {token!r} follows a parameter in {pattern!r}",
                )
            words.append(token)
            continue
        if parameters and parameters[-1].variadic:
            raise ValueError(f"Parameter follows a variadic parameter in {pattern!r}")
        parameters.append(parameter)

    if not words:
        raise ValueError(f"Route pattern {pattern!r} has no command word")

    return RoutePattern(words=tuple(words), parameters=tuple(parameters))
