"""Test package initialisation.

The project modules (``models``, ``services``, ``modules``, ``utils``) live
one directory above this package and are imported by absolute name, the
same way ``main.py`` imports them.  Append the repository root to
``sys.path`` so the tests also run without an editable install.
"""

from __future__ import annotations

import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.append(str(ROOT))
