#!/usr/bin/env python3
"""Provider isolation check.

The dispatch core (core/, types/, utils/) must not know about concrete
providers. Provider names are taken from the plugin package directories, so
a newly added plugin is covered without editing this script.

Exit codes:
    0: No violations found
    1: Violations found
"""

from __future__ import annotations

import re
import sys
from pathlib import Path
from typing import Final

RED: Final[str] = "\033[91m"
GREEN: Final[str] = "\033[92m"
RESET: Final[str] = "\033[0m"

PROTECTED_DIRS: Final[tuple[str, ...]] = ("core", "types", "utils")

# Plugin identifiers that are also ordinary words in the core vocabulary
GENERIC_IDENTIFIERS: Final[frozenset[str]] = frozenset({"empty", "webhook"})


def discover_provider_names(package_root: Path) -> tuple[str, ...]:
    """Return plugin identifiers found under ``plugins/``."""
    plugins_dir = package_root / "plugins"
    names = (
        entry.name
        for entry in sorted(plugins_dir.iterdir())
        if entry.is_dir() and (entry / "__init__.py").exists() and not entry.name.startswith("_")
    )
    return tuple(name for name in names if name not in GENERIC_IDENTIFIERS)


def build_patterns(names: tuple[str, ...]) -> tuple[re.Pattern[str], re.Pattern[str]]:
    alternation = "|".join(re.escape(name) for name in names)
    import_pattern = re.compile(rf"message_sender\.plugins\.(?:{alternation})\b")
    name_pattern = re.compile(rf"\b(?:{alternation})\b", re.IGNORECASE)
    return import_pattern, name_pattern


def check_file(
    file_path: Path,
    import_pattern: re.Pattern[str],
    name_pattern: re.Pattern[str],
) -> list[tuple[int, str]]:
    """Return ``(line number, description)`` for each violation in a file."""
    violations: list[tuple[int, str]] = []
    try:
        lines = file_path.read_text(encoding="utf-8").splitlines()
    except OSError as e:
        print(f"Warning: Could not read {file_path}: {e}", file=sys.stderr)
        return violations

    for line_num, line in enumerate(lines, start=1):
        if import_pattern.search(line):
            violations.append((line_num, f"Import from provider plugin: {line.strip()}"))
        elif name_pattern.search(line):
            violations.append((line_num, f"Provider name reference: {line.strip()}"))
    return violations


def main() -> int:
    project_root = Path(__file__).resolve().parent.parent
    package_root = project_root / "src" / "message_sender"
    if not package_root.exists():
        print(f"{RED}Error: Could not find src/message_sender{RESET}", file=sys.stderr)
        return 1

    names = discover_provider_names(package_root)
    if not names:
        print(f"{GREEN}No provider plugins to check against{RESET}")
        return 0
    import_pattern, name_pattern = build_patterns(names)

    print(f"Checking {', '.join(PROTECTED_DIRS)} for references to: {', '.join(names)}\n")
    found: dict[Path, list[tuple[int, str]]] = {}
    for protected_dir in PROTECTED_DIRS:
        for py_file in sorted((package_root / protected_dir).rglob("*.py")):
            if "__pycache__" in py_file.parts:
                continue
            file_violations = check_file(py_file, import_pattern, name_pattern)
            if file_violations:
                found[py_file] = file_violations

    if not found:
        print(f"{GREEN}No provider isolation violations found{RESET}")
        return 0

    for file_path, violations in found.items():
        print(f"{RED}{file_path.relative_to(project_root)}{RESET}")
        for line_num, description in violations:
            print(f"  {line_num}: {description}")
        print()
    total = sum(len(v) for v in found.values())
    print(f"{RED}Provider isolation check failed ({total} violations){RESET}")
    return 1


if __name__ == "__main__":
    sys.exit(main())
