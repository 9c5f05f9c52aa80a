#!/usr/bin/env python3
"""Check for banned Python constructions in wordesc source.

Banned constructions:

    Construction          Reason                            Use instead
    --------------------  --------------------------------  --------------------------
    import shlex          wordesc is the quoting authority  wordesc.core.quote
    from shlex import     and must not mix in shlex.quote   quote() / join()
    import pipes          deprecated alias of shlex.quote   wordesc.core.quote
    print() in core/      core modules never write output   structlog via core.config
    bare except:          hides decode and buffer errors    except SomeError:
"""

import ast
import os
import sys

BANNED_MODULES = frozenset({"shlex", "pipes"})


def find_python_files(directory):
    """Find all .py files recursively, skipping caches."""
    result = []
    for root, dirs, files in os.walk(directory):
        if "__pycache__" in dirs:
            dirs.remove("__pycache__")
        for f in files:
            if f.endswith(".py"):
                result.append(os.path.join(root, f))
    result.sort()
    return result


def check_file(filepath):
    with open(filepath) as f:
        source = f.read()

    tree = ast.parse(source, filepath)
    errors = []
    in_core = f"{os.sep}core{os.sep}" in filepath

    for node in ast.walk(tree):
        lineno = getattr(node, "lineno", 0)

        # import shlex
        if isinstance(node, ast.Import):
            for alias in node.names:
                if alias.name in BANNED_MODULES:
                    errors.append(
                        (lineno, f"import {alias.name}: banned, use wordesc.core.quote")
                    )

        # from shlex import ...
        if isinstance(node, ast.ImportFrom):
            if node.module in BANNED_MODULES:
                errors.append(
                    (lineno, f"from {node.module} import: banned, use wordesc.core.quote")
                )

        # print(...) inside core/
        if in_core and isinstance(node, ast.Call):
            if isinstance(node.func, ast.Name) and node.func.id == "print":
                errors.append((lineno, "print(): banned in core, log with structlog"))

        # except:
        if isinstance(node, ast.ExceptHandler) and node.type is None:
            errors.append((lineno, "bare except: banned, name the exception"))

    return errors


def main():
    src_dir = sys.argv[1] if len(sys.argv) > 1 else "src"

    if not os.path.isdir(src_dir):
        print(f"Directory not found: {src_dir}")
        sys.exit(1)

    files = find_python_files(src_dir)
    if not files:
        print(f"No Python files found in: {src_dir}")
        sys.exit(1)

    all_errors = []
    for filepath in files:
        try:
            errors = check_file(filepath)
            for lineno, description in errors:
                all_errors.append((filepath, lineno, description))
        except SyntaxError as e:
            print(f"Syntax error in {filepath}: {e}")
            sys.exit(1)

    if not all_errors:
        sys.exit(0)

    print(f"Found {len(all_errors)} banned construction(s):")
    for filepath, lineno, description in sorted(all_errors):
        print(f"  {filepath}:{lineno}: {description}")
    sys.exit(1)


if __name__ == "__main__":
    main()
