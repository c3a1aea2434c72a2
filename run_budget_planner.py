#!/usr/bin/env python3
"""Direct launcher for the Budget Planner.

This script launches Streamlit on ``budget_planner/app.py`` from the
project root so the package imports resolve.
"""

import sys
import subprocess
import os
from pathlib import Path

project_root = Path(__file__).parent.resolve()
app_path = project_root / "budget_planner" / "app.py"

if __name__ == "__main__":
    os.chdir(project_root)
    sys.path.insert(0, str(project_root))
    subprocess.run([
        sys.executable, "-m", "streamlit", "run",
        str(app_path),
    ])
