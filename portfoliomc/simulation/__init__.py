"""Monte Carlo simulation layer.

The engine in :mod:`portfoliomc.simulation.engine` samples Gaussian annual
returns, compounds them over a number of periods while deflating by
inflation, and keeps the sorted final balances. Per-run trajectories are
streamed to a line sink (see :mod:`portfoliomc.simulation.sinks`).
"""
