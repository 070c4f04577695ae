"""Top-level package for the ExGo budgeting engine.

This package holds the computations behind the ExGo screens.  The
primary modules are:

* ``aggregation`` – monthly totals, category breakdown and daily spending
* ``goals`` – savings goal progress recomputed from saved transactions
* ``recurring`` – upcoming and due occurrences of recurring transactions
* ``budgets`` / ``credit`` – mini budgets and credit products
* ``gamification`` – XP, levels, logging streaks, badges and challenges
* ``report`` – the self-contained HTML monthly report
* ``visualization`` – functions that generate Plotly figures
* ``ledger`` / ``storage`` – the JSON-backed collections

To export a report from the command line you can execute:

```bash
python scripts/export_monthly_report.py --month 2024-03
```
"""

from . import aggregation  # noqa: F401  # re-exported for convenience
from . import goals  # noqa: F401  # re-exported for convenience
from . import recurring  # noqa: F401  # re-exported for convenience
from . import report  # noqa: F401  # re-exported for convenience
from . import visualization  # noqa: F401  # re-exported for convenience
from .errors import FinanceError, NotFoundError, StorageError, ValidationError  # noqa: F401

__all__ = [
    "aggregation",
    "goals",
    "recurring",
    "report",
    "visualization",
    "FinanceError",
    "NotFoundError",
    "StorageError",
    "ValidationError",
]
