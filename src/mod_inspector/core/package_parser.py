"""Normalization of analyzer JSON results and package references."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import structlog

from mod_inspector.models.analysis import (
    DEFAULT_PREFIX,
    UNKNOWN,
    UNKNOWN_VERSION,
    UNNAMED,
    AnalysisResult,
    PackageDependencies,
    PackageUuid,
)
from mod_inspector.utils.logging import LogEventNames

log = structlog.get_logger()


def parse_uuid(uuid: str | None) -> PackageUuid:
    """Split a package uuid of the form ``game@version/category/.../name``.

    Example:
        parse_uuid("onb@2.0.0/player/MegamanBN6_falzar")
        -> PackageUuid(game="onb", version="2.0.0", category="player",
                       name="MegamanBN6_falzar", path="player/MegamanBN6_falzar")

    Args:
        uuid: Raw uuid string

    Returns:
        Parsed parts, with placeholders for anything absent
    """
    if not uuid or not isinstance(uuid, str):
        return PackageUuid()

    game, sep, rest = uuid.partition("@")
    if not sep:
        # No game prefix: the whole string is the name.
        return PackageUuid(name=uuid)

    parts = rest.split("/")
    if len(parts) < 2:
        return PackageUuid(game=game, version=parts[0])

    path_parts = parts[1:]
    return PackageUuid(
        game=game,
        version=parts[0],
        category=path_parts[0] or UNKNOWN,
        name=path_parts[-1] or UNKNOWN,
        path="/".join(path_parts),
    )


def _known(value: str) -> str:
    """Blank out placeholders so a real value further down can take over."""
    return "" if value.startswith(DEFAULT_PREFIX) else value


def _string_list(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, str) and item]


def parse_analysis_result(raw: Mapping[str, Any] | None) -> AnalysisResult:
    """Normalize one analyzer result.

    The engine's payload may sit under ``data`` or ``json``. A result
    without a payload is returned with ``valid=False``, keeping whatever
    transcript text came with it.

    Args:
        raw: Decoded analyzer result

    Returns:
        Normalized result
    """
    if not isinstance(raw, Mapping):
        return AnalysisResult(valid=False, error="Invalid result structure")

    stdout = raw.get("stdout") or ""
    stderr = raw.get("stderr") or ""
    payload = raw.get("data") or raw.get("json")

    if not isinstance(payload, Mapping):
        log.warning(LogEventNames.ANALYSIS_RESULT_INVALID, error=raw.get("error"))
        return AnalysisResult(
            valid=False,
            error=raw.get("error") or "Invalid result structure",
            stdout=stdout,
            stderr=stderr,
        )

    uuid = payload.get("uuid") or payload.get("id") or ""
    uuid_info = parse_uuid(uuid)

    raw_name = payload.get("name")
    if not raw_name or "unnamed" in str(raw_name).lower():
        log.warning(
            LogEventNames.ANALYSIS_RESULT_UNNAMED,
            raw_name=raw_name,
            raw_id=payload.get("id"),
        )

    # The uuid's category is authoritative; the engine's own is the fallback.
    if uuid_info.category != UNKNOWN:
        category = uuid_info.category
    else:
        category = payload.get("category") or UNKNOWN

    data = payload.get("data")
    return AnalysisResult(
        valid=True,
        id=payload.get("id") or _known(uuid_info.name) or UNKNOWN,
        uuid=uuid,
        game=uuid_info.game,
        name=raw_name or _known(uuid_info.name) or UNNAMED,
        description=payload.get("description") or "",
        version=_known(uuid_info.version) or payload.get("version") or UNKNOWN_VERSION,
        category=category,
        path=uuid_info.path,
        bytes=payload.get("bytes") or 0,
        data=dict(data) if isinstance(data, Mapping) else {},
        dependencies=tuple(_string_list(payload.get("dependencies"))),
        stdout=stdout,
        stderr=stderr,
    )


def extract_dependencies(result: AnalysisResult) -> PackageDependencies:
    """Collect the packages an analyzed package depends on.

    Library packages list theirs under ``data.dependencies``; any
    top-level ``dependencies`` are added after. Duplicates are dropped,
    first occurrence kept.

    Args:
        result: Normalized analyzer result

    Returns:
        Package id with its de-duplicated dependencies
    """
    dependencies: list[str] = []
    if result.is_library:
        dependencies.extend(_string_list(result.data.get("dependencies")))
    dependencies.extend(result.dependencies)

    return PackageDependencies(
        package_id=result.id or UNKNOWN,
        dependencies=tuple(dict.fromkeys(dependencies)),
        name=result.name,
    )
