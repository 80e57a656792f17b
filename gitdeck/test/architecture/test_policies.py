from __future__ import annotations

import ast
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True, slots=True)
class ImportRef:
    module: str
    line: int


def iter_python_files(root: Path, base: Path | None = None) -> list[Path]:
    files: list[Path] = []
    for path in sorted((base or root).rglob("*.py")):
        rel = path.relative_to(root)
        if any(part.startswith(".") or part == "__pycache__" for part in rel.parts):
            continue
        if rel.parts and rel.parts[0] == "test":
            continue
        files.append(path)
    return files


def read_tree(path: Path) -> ast.AST:
    return ast.parse(path.read_text(encoding="utf-8"), filename=str(path))


def parse_imports(path: Path) -> list[ImportRef]:
    imports: list[ImportRef] = []
    for node in ast.walk(read_tree(path)):
        if isinstance(node, ast.Import):
            imports.extend(ImportRef(alias.name, node.lineno) for alias in node.names)
        elif isinstance(node, ast.ImportFrom) and not node.level and node.module is not None:
            imports.append(ImportRef(node.module, node.lineno))
    return imports


def matches_prefix(module: str, prefix: str) -> bool:
    return module == prefix or module.startswith(prefix + ".")


def _direct_subprocess_calls(tree: ast.AST) -> list[int]:
    lines: list[int] = []
    for node in ast.walk(tree):
        if not isinstance(node, ast.Call) or not isinstance(node.func, ast.Attribute):
            continue
        func = node.func
        if func.attr not in {"run", "call", "check_call", "check_output", "Popen"}:
            continue
        if isinstance(func.value, ast.Name) and func.value.id == "subprocess":
            lines.append(node.lineno)
    return lines


def test_direct_subprocess_usage_is_limited_to_process_module(arch_checks, gitdeck_root: Path) -> None:
    allowlist = {"platform/process.py"}

    offenders: list[str] = []
    for file_path in iter_python_files(gitdeck_root):
        rel = file_path.relative_to(gitdeck_root)
        if rel.as_posix() in allowlist:
            continue
        for line in _direct_subprocess_calls(read_tree(file_path)):
            offenders.append(f"{rel}:{line}: direct subprocess call outside allowlist")

    assert not offenders, "Subprocess policy violations:\n" + "\n".join(offenders)


def test_direct_rich_imports_are_limited(arch_checks, gitdeck_root: Path) -> None:
    allowlist = {"output/console.py", "events/busy.py"}

    offenders: list[str] = []
    for file_path in iter_python_files(gitdeck_root):
        rel = file_path.relative_to(gitdeck_root)
        if rel.as_posix() in allowlist:
            continue
        for item in parse_imports(file_path):
            if matches_prefix(item.module, "rich"):
                offenders.append(f"{rel}:{item.line}: direct rich import '{item.module}'")

    assert not offenders, "Direct rich usage policy violations:\n" + "\n".join(offenders)


def test_lower_layers_do_not_import_upper_layers(arch_checks, gitdeck_root: Path) -> None:
    forbidden = {
        "core": ("gitdeck.platform", "gitdeck.git", "gitdeck.output", "gitdeck.events", "gitdeck.services", "gitdeck.cli"),
        "platform": ("gitdeck.git", "gitdeck.output", "gitdeck.events", "gitdeck.services", "gitdeck.cli"),
        "git": ("gitdeck.events", "gitdeck.services", "gitdeck.cli"),
        "output": ("gitdeck.git", "gitdeck.events", "gitdeck.services", "gitdeck.cli"),
        "events": ("gitdeck.git", "gitdeck.services", "gitdeck.cli"),
        "services": ("gitdeck.cli",),
    }

    offenders: list[str] = []
    for layer, prefixes in forbidden.items():
        for file_path in iter_python_files(gitdeck_root, gitdeck_root / layer):
            rel = file_path.relative_to(gitdeck_root)
            for item in parse_imports(file_path):
                if any(matches_prefix(item.module, p) for p in prefixes):
                    offenders.append(f"{rel}:{item.line}: forbidden import '{item.module}'")

    assert not offenders, "Layering violations:\n" + "\n".join(offenders)
