"""
FILE: src/core/mapper.py
Pure translation between the client contract and the solver wire shapes.
"""

import re
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, List, Optional

from src.core.ids import new_run_id
from src.core.models import (
    AllocationEntry,
    Dataset,
    NormalizedOptimizeResponse,
    NormalizedRebalanceResponse,
    OptimizationRequest,
    RebalanceRequest,
    TimeSeries,
)
from src.core.solver_models import (
    SolverDataset,
    SolverOptimizeRequest,
    SolverPortfolioEntry,
    SolverRawResponse,
    SolverRebalanceRawResponse,
    SolverRebalanceRequest,
)

DATASET_TO_SOLVER: Dict[Dataset, SolverDataset] = {
    Dataset.NIFTY50: SolverDataset.NIFTY50,
    Dataset.NASDAQ100: SolverDataset.NASDAQ,
    Dataset.CRYPTO50: SolverDataset.CRYPTO,
}
# Schema validation rejects unknown datasets before mapping; this only keeps the lookup total.
FALLBACK_SOLVER_DATASET = SolverDataset.NIFTY50

QUANTUM_SERIES = "quantum"
CLASSICAL_SERIES = "classical"

_TRAILING_DAY_INDEX = re.compile(r"(\d+)\s*$")


def map_dataset(dataset: Any) -> SolverDataset:
    return DATASET_TO_SOLVER.get(dataset, FALLBACK_SOLVER_DATASET)


def round_half_away_from_zero(value: float | Decimal) -> int:
    decimal_value = value if isinstance(value, Decimal) else Decimal(str(value))
    return int(decimal_value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def to_solver_request(request: OptimizationRequest) -> SolverOptimizeRequest:
    constraints = request.weight_constraints
    return SolverOptimizeRequest(
        dataset_option=map_dataset(request.dataset),
        budget=request.max_assets,
        risk_factor=request.risk_level.value,
        total_investment=request.total_budget,
        time_horizon=request.time_horizon_days,
        objective=request.objective.value,
        solver_params=dict(request.solver_params) if request.solver_params else None,
        min_weight=constraints.min_weight if constraints else None,
        max_weight=constraints.max_weight if constraints else None,
        include=list(request.include_list) if request.include_list else None,
        exclude=list(request.exclude_list) if request.exclude_list else None,
    )


def to_solver_rebalance_request(request: RebalanceRequest) -> SolverRebalanceRequest:
    return SolverRebalanceRequest(
        dataset_option=map_dataset(request.dataset),
        budget=request.max_assets,
        risk_factor=request.risk_level.value,
        total_investment=request.total_budget,
        time_horizon=request.time_horizon_days,
    )


def _percentage_value(entry: SolverPortfolioEntry) -> int:
    if entry.percentage is not None:
        return round_half_away_from_zero(entry.percentage)
    return round_half_away_from_zero(Decimal(str(entry.weight)) * 100)


def _mean_expected_return(portfolio: List[SolverPortfolioEntry]) -> Optional[float]:
    reported = [entry.expected_return for entry in portfolio if entry.expected_return is not None]
    if not reported:
        return None
    # dividing first keeps the mean finite for values near the float limit
    return sum(value / len(reported) for value in reported)


def to_normalized_response(
    raw: SolverRawResponse,
    *,
    source: str,
    run_id: Optional[str] = None,
) -> NormalizedOptimizeResponse:
    diagnostics: Dict[str, Any] = {
        "backend": source,
        "dataset": raw.dataset,
        "objectiveValue": raw.objective_value,
        "gamma": raw.gamma,
    }
    if raw.model_extra:
        diagnostics["solverExtras"] = dict(raw.model_extra)

    return NormalizedOptimizeResponse(
        run_id=run_id or raw.run_id or new_run_id(),
        selected_asset_ids=[entry.asset for entry in raw.portfolio],
        weights=[entry.weight for entry in raw.portfolio],
        allocation=[
            AllocationEntry(name=entry.asset, percentage_value=_percentage_value(entry))
            for entry in raw.portfolio
        ],
        expected_return=_mean_expected_return(raw.portfolio),
        risk=None,
        sharpe=None,
        diagnostics=diagnostics,
    )


def _day_index(label: str, position: int) -> int:
    match = _TRAILING_DAY_INDEX.search(label)
    return int(match.group(1)) if match else position + 1


def to_normalized_rebalance_response(
    raw: SolverRebalanceRawResponse,
    *,
    source: str,
    run_id: Optional[str] = None,
) -> NormalizedRebalanceResponse:
    diagnostics: Dict[str, Any] = {"backend": source, "dataset": raw.dataset}
    if raw.model_extra:
        diagnostics["solverExtras"] = dict(raw.model_extra)

    return NormalizedRebalanceResponse(
        run_id=run_id or raw.run_id or new_run_id(),
        days=[_day_index(point.time, index) for index, point in enumerate(raw.evolution)],
        series=[
            TimeSeries(name=QUANTUM_SERIES, values=[point.future for point in raw.evolution]),
            TimeSeries(name=CLASSICAL_SERIES, values=[point.current for point in raw.evolution]),
        ],
        diagnostics=diagnostics,
    )
