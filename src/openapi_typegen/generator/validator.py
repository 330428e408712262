"""Validates generated modules for syntax and cross-module consistency."""

import ast


def validate_python(files: dict[str, str]) -> dict[str, str]:
    """Check Python files for syntax errors.

    Returns dict of {filename: error_message} for files with errors.
    """
    errors = {}
    for filename, content in files.items():
        if not filename.endswith(".py"):
            continue
        try:
            ast.parse(content, filename=filename)
        except SyntaxError as e:
            errors[filename] = f"SyntaxError: {e.msg} (line {e.lineno})"
    return errors


def defined_names(content: str) -> set[str]:
    """Top-level classes and assignments of a module."""
    names = set()
    for node in ast.parse(content).body:
        if isinstance(node, ast.ClassDef):
            names.add(node.name)
        elif isinstance(node, ast.Assign):
            names.update(t.id for t in node.targets if isinstance(t, ast.Name))
    return names


def validate_imports(files: dict[str, str]) -> dict[str, str]:
    """Check that relative imports between generated files resolve.

    Returns dict of {filename: error_message} for files importing
    names their sibling module does not define.
    """
    errors = {}
    for filename, content in files.items():
        if not filename.endswith(".py"):
            continue
        for node in ast.parse(content).body:
            if not (isinstance(node, ast.ImportFrom) and node.level == 1 and node.module):
                continue
            sibling = f"{node.module}.py"
            if sibling not in files:
                errors[filename] = f"imports missing module {sibling}"
                break
            missing = {a.name for a in node.names} - defined_names(files[sibling])
            if missing:
                errors[filename] = f"{sibling} does not define {', '.join(sorted(missing))}"
                break
    return errors


def validate_files(files: dict[str, str]) -> dict[str, str]:
    """Run all validations on generated files.

    Import checks only run once every file parses.
    """
    errors = validate_python(files)
    if not errors:
        errors.update(validate_imports(files))
    return errors
