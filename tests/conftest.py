"""Root conftest.py for test configuration.

Ensures local src/ directory takes priority over any installed packages and
provides small filesystem fixtures shared across test packages.
"""

import sys
from pathlib import Path

import pytest

# Insert local src directory at the beginning of sys.path
# This ensures that the local promptpilot package is used, not any installed one
_src_dir = Path(__file__).parent.parent / "src"
if str(_src_dir) not in sys.path:
    sys.path.insert(0, str(_src_dir))

# Force reimport of promptpilot modules if already imported
for module_name in list(sys.modules.keys()):
    if module_name.startswith("promptpilot"):
        del sys.modules[module_name]


@pytest.fixture
def sample_tree(tmp_path: Path) -> Path:
    """Build the canonical tree: a.txt, sub/b.txt, sub/c.txt under tmp_path/root."""
    root = tmp_path / "root"
    (root / "sub").mkdir(parents=True)
    (root / "a.txt").write_text("a")
    (root / "sub" / "b.txt").write_text("b")
    (root / "sub" / "c.txt").write_text("c")
    return root
