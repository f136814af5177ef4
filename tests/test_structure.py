"""
Structure lint tests.
Verify that the component skeleton and layer layout follow conventions.
"""

import ast
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).parent.parent
SRC = PROJECT_ROOT / "src"
COMPONENTS = ["auth", "posts"]


class TestProjectStructure:
    def test_layer_directories_exist(self) -> None:
        for layer in ("domain", "components", "adapters", "api", "rules", "app_shell"):
            assert (SRC / layer).is_dir(), f"src/{layer} must exist"

    def test_tests_structure_exists(self) -> None:
        assert (PROJECT_ROOT / "tests" / "unit").is_dir()
        assert (PROJECT_ROOT / "tests" / "integration").is_dir()
        assert (PROJECT_ROOT / "tests" / "regression").is_dir()

    def test_runtime_files_exist(self) -> None:
        assert (PROJECT_ROOT / "rules.yaml").is_file()
        assert sorted((PROJECT_ROOT / "migrations").glob("*.sql")), "need at least one migration"


class TestComponentStructure:
    @pytest.mark.parametrize("name", COMPONENTS)
    def test_component_has_standard_files(self, name: str) -> None:
        component_dir = SRC / "components" / name
        for filename in ("__init__.py", "models.py", "ports.py", "component.py"):
            assert (component_dir / filename).is_file(), f"{name}/{filename} missing"
        assert (component_dir / "tests" / "test_unit.py").is_file()

    @pytest.mark.parametrize("name", COMPONENTS)
    def test_component_does_not_import_adapters(self, name: str) -> None:
        """Components talk to the outside world through their ports only."""
        component_dir = SRC / "components" / name
        for path in component_dir.glob("*.py"):
            tree = ast.parse(path.read_text())
            for node in ast.walk(tree):
                if isinstance(node, ast.ImportFrom) and node.module:
                    assert not node.module.startswith(
                        ("src.adapters", "src.api")
                    ), f"{path.name} imports {node.module}"


def test_visibility_is_single_sourced() -> None:
    """Only the policy module spells out the publish-time comparison."""
    offenders = []
    for path in SRC.rglob("*.py"):
        if "tests" in path.parts or path.name == "policy.py":
            continue
        if "published_at <=" in path.read_text() or "<= now" in path.read_text():
            offenders.append(str(path.relative_to(PROJECT_ROOT)))
    assert offenders == []
