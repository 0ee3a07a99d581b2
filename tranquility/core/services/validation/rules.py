"""
Semantic rules — constraints a JSON Schema cannot express.

Rules run on the canonical value even when the structural layer already
failed, so they never assume the shape is right.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import PurePosixPath, PureWindowsPath
from typing import Any

from tranquility.core.services.validation.loader import SUPPORTED_EXTENSIONS, DocumentKind
from tranquility.core.services.validation.report import Violation

logger = logging.getLogger(__name__)


def _items(value: Any, key: str) -> list[Any]:
    if isinstance(value, dict) and isinstance(value.get(key), list):
        return value[key]
    return []


def _semantic(location: str, message: str) -> Violation:
    return Violation("semantic", location, message)


# ── Applications ────────────────────────────────────────────────


def application_rules(value: Any) -> list[Violation]:
    """Each install method needs steps or a package manager; a package
    manager without full install/uninstall steps needs a package name."""
    violations = []
    for i, app in enumerate(_items(value, "applications")):
        for j, version in enumerate(_items(app, "versions")):
            for k, method in enumerate(_items(version, "install_methods")):
                if not isinstance(method, dict):
                    continue
                where = f"applications/{i}/versions/{j}/install_methods/{k}"
                label = f"App[{i}] Version[{j}] Method[{k}]"
                has_steps = method.get("steps") is not None
                has_pm = method.get("package_manager") is not None

                if not has_steps and not has_pm:
                    violations.append(_semantic(
                        where,
                        f"{label}: must define at least one installation method, "
                        "either 'steps' or 'package_manager'",
                    ))
                    continue

                if has_pm:
                    steps = method.get("steps")
                    steps = steps if isinstance(steps, dict) else {}
                    full_steps = (
                        steps.get("install") is not None
                        and steps.get("uninstall") is not None
                    )
                    if not full_steps and method.get("package_name") in (None, ""):
                        violations.append(_semantic(
                            where,
                            f"{label}: 'package_name' is required when 'package_manager' "
                            "is used without both 'install' and 'uninstall' steps",
                        ))
    return violations


# ── Settings ────────────────────────────────────────────────────

_PATH_FIELDS = ("applications_file", "vps_file", "log_directory")
_FILE_FIELDS = ("applications_file", "vps_file")


def _is_absolute(text: str) -> bool:
    return PurePosixPath(text).is_absolute() or PureWindowsPath(text).is_absolute()


def config_rules(value: Any) -> list[Violation]:
    """Path fields must be absolute; file fields need a supported extension."""
    if not isinstance(value, dict):
        return []
    violations = []
    for name in _PATH_FIELDS:
        field = value.get(name)
        if field is None:
            logger.info("Optional field '%s' missing, default will be used", name)
            continue
        if not isinstance(field, str) or not field.strip():
            violations.append(_semantic(name, f"'{name}' must be a non-empty path"))
            continue
        if not _is_absolute(field):
            violations.append(_semantic(name, f"'{name}' must be an absolute path: {field}"))
        if name in _FILE_FIELDS:
            ext = field.rsplit(".", 1)[-1].lower() if "." in field else ""
            if ext not in SUPPORTED_EXTENSIONS:
                violations.append(_semantic(
                    name,
                    f"'{name}' has unsupported extension '{ext or '<none>'}' "
                    f"(expected one of: {', '.join(SUPPORTED_EXTENSIONS)})",
                ))
    return violations


# ── VPS ─────────────────────────────────────────────────────────


def _valid_port(port: Any) -> bool:
    if isinstance(port, bool):
        return False
    if isinstance(port, int):
        return 1 <= port <= 65535
    if isinstance(port, str) and port.strip().isdigit():
        return 1 <= int(port) <= 65535
    return False


def vps_rules(value: Any) -> list[Violation]:
    """Each entry needs a name, a host and (if given) a valid port."""
    violations = []
    for i, entry in enumerate(_items(value, "vps")):
        if not isinstance(entry, dict):
            continue
        where = f"vps/{i}"
        name = entry.get("name")
        if not isinstance(name, str) or not name.strip():
            violations.append(_semantic(f"{where}/name", "Missing VPS name"))
            name = f"#{i}"
        host = entry.get("host")
        if not isinstance(host, str) or not host.strip():
            violations.append(_semantic(f"{where}/host", f"VPS `{name}` has no host specified"))
        port = entry.get("port")
        if port is not None and not _valid_port(port):
            violations.append(_semantic(
                f"{where}/port", f"VPS `{name}` has an invalid port: {port!r}",
            ))
    return violations


RULES: dict[DocumentKind, Callable[[Any], list[Violation]]] = {
    DocumentKind.APPLICATIONS: application_rules,
    DocumentKind.CONFIG: config_rules,
    DocumentKind.VPS: vps_rules,
}
