"""
Import-boundary enforcement between the jewel packages.

1. Engine purity       -- jewel_engines/** may not import the database,
                          ORM models, services or config layers.
2. Kernel independence -- jewel_kernel/** may not import any outer package.
3. Ingestion purity    -- jewel_ingestion/** may not import SQLAlchemy,
                          ORM models or services.
4. Engine no-impure    -- jewel_engines/** may not read the wall clock.

All scanning is done via AST; these tests are read-only.
"""

import ast
import glob
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[2]


def _python_files(package: str) -> list[str]:
    """Return all .py files under *package*, sorted for deterministic order."""
    return sorted(glob.glob(f"{REPO_ROOT / package}/**/*.py", recursive=True))


def _extract_imports(filepath: str) -> list[tuple[int, str]]:
    """Return (line_number, module_string) for every import in *filepath*."""
    source = Path(filepath).read_text(encoding="utf-8")
    tree = ast.parse(source, filename=filepath)

    results: list[tuple[int, str]] = []
    for node in ast.walk(tree):
        if isinstance(node, ast.Import):
            for alias in node.names:
                results.append((node.lineno, alias.name))
        elif isinstance(node, ast.ImportFrom):
            if node.module:
                results.append((node.lineno, node.module))
    return results


def _matches_any(module: str, prefixes: tuple[str, ...]) -> bool:
    """True if *module* equals or is a child of any prefix."""
    return any(module == p or module.startswith(f"{p}.") for p in prefixes)


def _violations(package: str, forbidden: tuple[str, ...]) -> list[str]:
    found = []
    for filepath in _python_files(package):
        for lineno, module in _extract_imports(filepath):
            if _matches_any(module, forbidden):
                rel = Path(filepath).relative_to(REPO_ROOT)
                found.append(f"{rel}:{lineno} imports {module}")
    return found


class TestEnginePurity:
    FORBIDDEN = (
        "sqlalchemy",
        "jewel_kernel.db",
        "jewel_kernel.models",
        "jewel_services",
        "jewel_ingestion",
        "jewel_config",
    )

    def test_files_found(self):
        assert _python_files("jewel_engines")

    def test_no_forbidden_imports(self):
        violations = _violations("jewel_engines", self.FORBIDDEN)
        assert not violations, "\n".join(violations)

    def test_no_wall_clock(self):
        offenders = []
        for filepath in _python_files("jewel_engines"):
            tree = ast.parse(Path(filepath).read_text(encoding="utf-8"))
            for node in ast.walk(tree):
                if (
                    isinstance(node, ast.Attribute)
                    and node.attr in ("now", "today", "utcnow")
                    and isinstance(node.value, ast.Name)
                    and node.value.id in ("datetime", "date")
                ):
                    offenders.append(f"{filepath}:{node.lineno}")
        assert not offenders, "\n".join(offenders)


class TestKernelIndependence:
    def test_kernel_imports_no_outer_package(self):
        violations = _violations(
            "jewel_kernel",
            ("jewel_config", "jewel_engines", "jewel_ingestion", "jewel_services"),
        )
        assert not violations, "\n".join(violations)


class TestIngestionPurity:
    def test_no_database_or_services(self):
        violations = _violations(
            "jewel_ingestion",
            ("sqlalchemy", "jewel_kernel.db", "jewel_kernel.models", "jewel_services"),
        )
        assert not violations, "\n".join(violations)

    def test_adapters_do_not_import_validation(self):
        violations = _violations(
            "jewel_ingestion/adapters",
            ("jewel_ingestion.domain", "jewel_ingestion.services", "jewel_engines"),
        )
        assert not violations, "\n".join(violations)
