"""Vulture whitelist — references that appear unused but are called dynamically.

Vulture scans for unreachable code.  Items listed here are known false
positives: console-script entry points, pytest fixtures consumed via
dependency injection, protocol members, and context-manager hooks.

Usage:
    vulture portfoliomc tests scripts vulture_whitelist.py
"""

# ── Entry points (called by console_scripts, not imported) ──
from portfoliomc.main import main  # noqa: F401
from portfoliomc.sidecar import main as sidecar_main  # noqa: F401

# ── Pytest fixtures (injected by pytest, never called directly) ──
from tests.conftest import counting_sampler  # noqa: F401
from tests.conftest import fixed_sampler  # noqa: F401
from tests.conftest import sample_start_value  # noqa: F401
from tests.conftest import seeded_sampler  # noqa: F401

# ── Context-manager hooks (called by the ``with`` statement) ──
from portfoliomc.simulation.engine import MonteCarloSim

MonteCarloSim.__enter__  # noqa: B018
MonteCarloSim.__exit__  # noqa: B018
