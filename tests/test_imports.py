import subprocess
import sys
from pathlib import Path
import pytest

ROOT = Path(__file__).resolve().parent.parent


@pytest.mark.parametrize("module", [
    "warband.cli",
    "warband.system.save",
    "warband.battle",
    "warband.ui.keys",
])
def test_module_imports_in_fresh_interpreter(module):
    # each entry point must load on its own, whatever gets imported first
    proc = subprocess.run(
        [sys.executable, "-c", f"import {module}"],
        cwd=str(ROOT), capture_output=True, text=True,
    )
    assert proc.returncode == 0, proc.stderr
