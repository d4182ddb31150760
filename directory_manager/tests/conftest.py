from __future__ import annotations

from pathlib import Path
from typing import Callable, Iterable

import pytest


@pytest.fixture()
def make_tree(tmp_path: Path) -> Callable[..., Path]:
    """Create ``tmp_path/<root>`` holding one subdirectory per name."""

    def factory(root: str, names: Iterable[str], files: dict[str, str] | None = None) -> Path:
        base = tmp_path / root
        base.mkdir(parents=True, exist_ok=True)
        for name in names:
            (base / name).mkdir()
        for relative, content in (files or {}).items():
            target = base / relative
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(content, encoding="utf-8")
        return base

    return factory
