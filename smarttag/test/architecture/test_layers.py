from __future__ import annotations

import ast

from ._gate import require_arch_checks_enabled
from ._utils import PACKAGE_ROOT, absolute_imports, is_under, read_tree, relpath, source_files

# Modules of the release package that must stay free of I/O and presentation.
_PURE_RELEASE = ("errors", "ports", "strategy", "tags", "validation", "version")


def _violations(files: list[str], forbidden: tuple[str, ...]) -> list[str]:
    return [
        f"{rel}:{line}: forbidden import '{module}'"
        for rel in files
        for module, line in absolute_imports(PACKAGE_ROOT / rel)
        if any(is_under(module, prefix) for prefix in forbidden)
    ]


def test_release_domain_is_pure() -> None:
    require_arch_checks_enabled()

    offenders = _violations(
        [f"release/{name}.py" for name in _PURE_RELEASE],
        (
            "smarttag.git",
            "smarttag.platform",
            "smarttag.output",
            "smarttag.cli",
            "subprocess",
            "typer",
            "rich",
        ),
    )
    assert not offenders, "Release domain violations:\n" + "\n".join(offenders)


def test_release_package_does_not_import_cli() -> None:
    require_arch_checks_enabled()

    files = [relpath(p) for p in source_files(PACKAGE_ROOT / "release")]
    offenders = _violations(files, ("smarttag.cli", "typer"))
    assert not offenders, "release -> cli dependency violations:\n" + "\n".join(offenders)


def test_rich_is_only_imported_by_console() -> None:
    require_arch_checks_enabled()

    files = [relpath(p) for p in source_files() if relpath(p) != "output/console.py"]
    offenders = _violations(files, ("rich",))
    assert not offenders, "Direct rich usage policy violations:\n" + "\n".join(offenders)


def _subprocess_call_lines(tree: ast.AST) -> list[int]:
    return [
        node.lineno
        for node in ast.walk(tree)
        if isinstance(node, ast.Call)
        and isinstance(node.func, ast.Attribute)
        and isinstance(node.func.value, ast.Name)
        and node.func.value.id == "subprocess"
        and node.func.attr in {"run", "check_output", "Popen"}
    ]


def test_subprocess_only_in_process_runner() -> None:
    require_arch_checks_enabled()

    offenders = [
        f"{relpath(path)}:{line}: direct subprocess call"
        for path in source_files()
        if relpath(path) != "platform/process.py"
        for line in _subprocess_call_lines(read_tree(path))
    ]
    assert not offenders, "Subprocess policy violations:\n" + "\n".join(offenders)
