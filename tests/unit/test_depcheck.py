from __future__ import annotations

import subprocess
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(REPO_ROOT))

from tools.depcheck import find_layer_violations, find_violations


def test_depcheck_fails_on_forbidden_import(tmp_path: Path) -> None:
    domain_dir = tmp_path / "domain"
    domain_dir.mkdir(parents=True, exist_ok=True)

    violating_file = domain_dir / "model.py"
    violating_file.write_text("import sqlalchemy\n", encoding="utf-8")

    script_path = REPO_ROOT / "tools" / "depcheck.py"
    result = subprocess.run(
        [sys.executable, str(script_path), "--path", str(domain_dir)],
        capture_output=True,
        text=True,
        check=False,
    )

    combined_output = f"{result.stdout}\n{result.stderr}"
    assert result.returncode != 0
    assert "sqlalchemy" in combined_output
    assert str(violating_file) in combined_output


def test_domain_may_not_reach_application_layer(tmp_path: Path) -> None:
    module = tmp_path / "entities.py"
    module.write_text(
        "from kflow.application.dto.responses import OrderResponse\nfrom kflow.domain.common import money\n",
        encoding="utf-8",
    )

    violations = find_violations([module])

    assert [violation.module for violation in violations] == ["kflow.application.dto.responses"]


def test_source_tree_respects_layer_policies() -> None:
    assert find_layer_violations() == []
