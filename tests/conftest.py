import logging
from pathlib import Path
from typing import Dict

import pytest


@pytest.fixture(autouse=True)
def reset_package_logger():
    logger = logging.getLogger("globcopy")
    handlers = list(logger.handlers)
    level = logger.level
    yield
    logger.handlers = handlers
    logger.setLevel(level)


@pytest.fixture
def make_tree(tmp_path: Path):
    def _make(files: Dict[str, str], name: str = "tree") -> Path:
        root = tmp_path / name
        root.mkdir(parents=True, exist_ok=True)
        for rel, content in files.items():
            path = root / rel
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")
        return root

    return _make


@pytest.fixture
def sample_tree(make_tree) -> Path:
    return make_tree(
        {
            "a.txt": "alpha\n",
            "src/main.rs": "fn main() {}\n",
            "src/lib.rs": "pub fn lib() {}\n",
        }
    )
