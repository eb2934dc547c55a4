"""JSON-lines sidecar for driving the engine from another process.

Communicates via stdin/stdout using newline-delimited JSON messages.

Protocol:
    Request:  {"id": "uuid", "method": "string", "params": {}}
    Response: {"id": "uuid", "result": {}}
    Error:    {"id": "uuid", "error": {"message": "string", "traceback": "string"}}
"""

from __future__ import annotations

import json
import sys
import traceback
from typing import Any

import numpy as np

from portfoliomc.analysis.statistics import (
    percentile_rank,
    result_median,
    result_percentile,
)
from portfoliomc.simulation.engine import GeneratorSampler, MonteCarloSim


class _NumpyEncoder(json.JSONEncoder):
    """JSON encoder that handles NumPy types."""

    def default(self, o: Any) -> Any:
        """Convert NumPy types to JSON-serializable Python types."""
        if isinstance(o, np.ndarray):
            return o.tolist()
        if isinstance(o, np.integer):
            return int(o)
        if isinstance(o, np.floating):
            return float(o)
        return super().default(o)


def _handle_simulation_run(  # noqa: PLR0913
    mean: float,
    std_dev: float,
    inflation_rate: float,
    num_sims: int,
    periods: int,
    start: float,
    seed: int | None = None,
    percentiles: list[float] | None = None,
    include_results: bool = False,
) -> dict[str, Any]:
    """Run one batch and return its summary.

    Trajectory lines are not produced over this channel.

    Args:
        mean: Mean annual return as a percentage.
        std_dev: Standard deviation as a percentage.
        inflation_rate: Annual inflation rate as a percentage.
        num_sims: Number of runs.
        periods: Periods per run.
        start: Starting investment.
        seed: Random seed for reproducibility.
        percentiles: Extra percentile levels to report.
        include_results: If True, include the full sorted final values.

    Returns:
        Dict with the summary fields, a "percentiles" mapping, and
        optionally "results".

    """
    sim = MonteCarloSim(
        mean=mean,
        std_dev=std_dev,
        inflation_rate=inflation_rate,
        sampler=GeneratorSampler(seed),
    )
    sim.run_simulations(num_sims, periods, start)

    response: dict[str, Any] = sim.summarize()
    response["percentiles"] = {
        str(p): sim.get_result_percentile(p) for p in (percentiles or [])
    }
    if include_results:
        response["results"] = list(sim.get_results())
    return response


def _handle_median(values: list[float]) -> float | None:
    return result_median(sorted(values))


def _handle_percentile(values: list[float], percentile: float) -> float | None:
    return result_percentile(sorted(values), percentile)


def dispatch(method: str, params: dict[str, Any]) -> Any:
    """Route a method call to the appropriate handler.

    Args:
        method: The method name (e.g., "simulation.run").
        params: The parameters for the method.

    Returns:
        The result of the method call.

    Raises:
        ValueError: If the method is not recognized.

    """
    handlers: dict[str, Any] = {
        "simulation.run": _handle_simulation_run,
        "analysis.median": _handle_median,
        "analysis.percentile": _handle_percentile,
        "analysis.percentile_rank": percentile_rank,
    }
    if method not in handlers:
        msg = f"Unknown method: {method}"
        raise ValueError(msg)
    return handlers[method](**params)


def main() -> None:
    """Run the sidecar message loop.

    Reads newline-delimited JSON from stdin, dispatches to handlers,
    and writes JSON responses to stdout. Runs until stdin is closed.
    """
    for raw_line in sys.stdin:
        stripped = raw_line.strip()
        if not stripped:
            continue

        request: dict[str, Any] = {}
        try:
            request = json.loads(stripped)
            request_id = request.get("id", "unknown")
            method = request["method"]
            params = request.get("params", {})
            result = dispatch(method, params)
            response: dict[str, Any] = {"id": request_id, "result": result}
        except Exception as exc:  # noqa: BLE001 — dispatcher must catch all errors and return them as JSON
            request_id = (
                request.get("id", "unknown") if isinstance(request, dict) else "unknown"
            )
            response = {
                "id": request_id,
                "error": {
                    "message": str(exc),
                    "traceback": traceback.format_exc(),
                },
            }
        sys.stdout.write(json.dumps(response, cls=_NumpyEncoder) + "\n")
        sys.stdout.flush()


if __name__ == "__main__":
    main()
