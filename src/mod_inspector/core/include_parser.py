"""Extraction of static include targets from Lua source."""

from __future__ import annotations

import re
from collections.abc import Iterable

DEFAULT_INCLUDE_FUNCTIONS = ("include",)
DEFAULT_COMMENT_MARKER = "--"


class IncludeParser:
    """Finds the literal targets of include calls in Lua source.

    Accepted call forms, with or without parentheses:
    - ``include("path.lua")``
    - ``include('path.lua')``
    - ``include([[path.lua]])`` and leveled ``include[==[path.lua]==]``

    Lines whose trimmed text starts with the comment marker are skipped.
    Computed arguments (concatenation, variables) are not visible.
    """

    def __init__(
        self,
        function_names: Iterable[str] = DEFAULT_INCLUDE_FUNCTIONS,
        comment_marker: str = DEFAULT_COMMENT_MARKER,
    ) -> None:
        names = "|".join(re.escape(name) for name in function_names)
        self._comment_marker = comment_marker
        self._pattern = re.compile(
            rf"\b(?:{names})\s*(?:\(\s*)?"
            r"""(?:"([^"\n]+)"|'([^'\n]+)'|\[(=*)\[(.+?)\]\3\])"""
        )

    def parse(self, content: str | None) -> list[str]:
        """Return include targets in order of appearance, duplicates kept."""
        if not content:
            return []

        targets: list[str] = []
        for line in content.splitlines():
            if line.strip().startswith(self._comment_marker):
                continue
            for match in self._pattern.finditer(line):
                target = match.group(1) or match.group(2) or match.group(4)
                if target:
                    targets.append(target)
        return targets


_default_parser = IncludeParser()


def parse_includes_from_lua(content: str | None) -> list[str]:
    """Parse include targets with the default ``include`` function name."""
    return _default_parser.parse(content)
