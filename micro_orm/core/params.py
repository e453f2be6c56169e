"""SQL placeholder handling.

Builders accept `:name` and `[[name]]` placeholders. At build time the
bracket form is folded into `:name`, and parameters holding a Literal are
substituted into the SQL text. Drivers then convert `:name` to their own
paramstyle. String literals and PostgreSQL `::typecast` syntax are never
rewritten.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Mapping
from functools import lru_cache
from typing import Any

from micro_orm.core.literal import Literal

# Matches :name but not ::typecast and not inside words
# Negative lookbehind for : (handles ::), \w (handles mid-word colons)
_PARAM_PATTERN = re.compile(r"(?<![:\w]):([a-zA-Z_]\w*)")

# Matches [[name]]
_BRACKET_PATTERN = re.compile(r"\[\[([a-zA-Z_]\w*)\]\]")

# Matches single-quoted string literals (with escaped quotes handled)
_STRING_LITERAL_PATTERN = re.compile(r"'(?:[^'\\]|\\.)*'")


def _map_code_segments(sql: str, func: Callable[[str], str]) -> str:
    """Apply *func* to every part of *sql* outside single-quoted literals."""
    parts: list[str] = []
    last_end = 0

    for match in _STRING_LITERAL_PATTERN.finditer(sql):
        start, end = match.span()
        if start > last_end:
            parts.append(func(sql[last_end:start]))
        # Keep string literal as-is
        parts.append(match.group())
        last_end = end

    if last_end < len(sql):
        parts.append(func(sql[last_end:]))

    return "".join(parts)


def fold_placeholders(sql: str) -> str:
    """Rewrite `[[name]]` placeholders to `:name`."""
    if "[[" not in sql:
        return sql
    return _map_code_segments(sql, lambda segment: _BRACKET_PATTERN.sub(r":\1", segment))


def inline_literals(sql: str, params: Mapping[str, Any]) -> tuple[str, dict[str, Any]]:
    """Substitute Literal-valued parameters directly into *sql*.

    Returns:
        The rewritten SQL and the remaining (bindable) parameters.
    """
    sql = fold_placeholders(sql)
    literals = {name: value for name, value in params.items() if isinstance(value, Literal)}
    if not literals:
        return sql, dict(params)

    def _replace(match: re.Match[str]) -> str:
        name = match.group(1)
        if name in literals:
            return str(literals[name])
        return match.group(0)

    sql = _map_code_segments(sql, lambda segment: _PARAM_PATTERN.sub(_replace, segment))
    remaining = {name: value for name, value in params.items() if name not in literals}
    return sql, remaining


def merge_params(*groups: Mapping[str, Any]) -> dict[str, Any]:
    """Merge parameter groups, earlier groups first.

    A name repeated in a later group keeps its first position and takes the
    later value.
    """
    merged: dict[str, Any] = {}
    for group in groups:
        merged.update(group)
    return merged


def normalize_params(sql: str, paramstyle: str) -> str:
    """Convert :name parameters to the target param style.

    Args:
        sql: SQL string with :name parameters.
        paramstyle: Target style - 'named' (no conversion) or 'pyformat' (%(name)s).

    Returns:
        SQL with parameters converted to the target style.
    """
    if paramstyle == "named":
        return sql
    return _convert_to_pyformat(sql)


@lru_cache(maxsize=256)
def _convert_to_pyformat(sql: str) -> str:
    """Convert :name params to %(name)s, preserving string literals.

    Pyformat drivers treat every ``%`` as a format marker, so literal percent
    signs (LIKE patterns, modulo) are doubled first, inside strings too.
    """
    sql = sql.replace("%", "%%")
    return _map_code_segments(sql, lambda segment: _PARAM_PATTERN.sub(r"%(\1)s", segment))
