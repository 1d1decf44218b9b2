import json
from decimal import Decimal

import pytest

from src.core.mapper import (
    FALLBACK_SOLVER_DATASET,
    map_dataset,
    round_half_away_from_zero,
    to_normalized_rebalance_response,
    to_normalized_response,
    to_solver_rebalance_request,
    to_solver_request,
)
from src.core.models import (
    Dataset,
    Objective,
    OptimizationRequest,
    RebalanceRequest,
    RiskLevel,
)
from src.core.solver_models import SolverDataset, SolverRawResponse, SolverRebalanceRawResponse
from tests.factories import (
    optimization_payload,
    portfolio_entry,
    raw_optimize_response,
    raw_rebalance_response,
    rebalance_payload,
)


def _raw(**kwargs) -> SolverRawResponse:
    return SolverRawResponse.model_validate(raw_optimize_response(**kwargs))


@pytest.mark.parametrize(
    "dataset, expected",
    [
        ("NIFTY50", SolverDataset.NIFTY50),
        ("NASDAQ100", SolverDataset.NASDAQ),
        ("CRYPTO50", SolverDataset.CRYPTO),
    ],
)
def test_dataset_is_translated_to_solver_enum(dataset, expected):
    request = OptimizationRequest.model_validate(optimization_payload(dataset=dataset))
    solver_request = to_solver_request(request)
    assert solver_request.dataset_option is expected
    assert solver_request.dataset_option in set(SolverDataset)


def test_unmapped_dataset_falls_back_when_validation_was_bypassed():
    request = OptimizationRequest.model_construct(
        dataset="SP500",
        time_horizon_days=10,
        risk_level=RiskLevel.LOW,
        total_budget=5000.0,
        max_assets=2,
        objective=Objective.SHARPE,
        solver_params=None,
        weight_constraints=None,
        include_list=None,
        exclude_list=None,
    )
    assert to_solver_request(request).dataset_option is FALLBACK_SOLVER_DATASET
    assert map_dataset(None) is FALLBACK_SOLVER_DATASET


def test_solver_request_renames_fields_and_passes_numbers_through():
    request = OptimizationRequest.model_validate(
        optimization_payload(
            totalBudget=123456.5,
            maxAssets=4,
            riskLevel="high",
            objective="variance",
            solverParams={"p": 3, "seed": 7},
            weightConstraints={"minWeight": 0.05, "maxWeight": 0.5},
            includeList=["TCS"],
            excludeList=["INFY"],
        )
    )
    body = to_solver_request(request).model_dump(mode="json", exclude_none=True)
    assert body == {
        "dataset_option": "NIFTY50",
        "budget": 4,
        "risk_factor": "high",
        "total_investment": 123456.5,
        "time_horizon": 30,
        "objective": "variance",
        "solver_params": {"p": 3, "seed": 7},
        "min_weight": 0.05,
        "max_weight": 0.5,
        "include": ["TCS"],
        "exclude": ["INFY"],
    }


def test_optional_fields_are_omitted_from_solver_body():
    request = OptimizationRequest.model_validate(optimization_payload())
    body = to_solver_request(request).model_dump(mode="json", exclude_none=True)
    assert set(body) == {
        "dataset_option",
        "budget",
        "risk_factor",
        "total_investment",
        "time_horizon",
        "objective",
    }


def test_rebalance_request_mapping():
    request = RebalanceRequest.model_validate(rebalance_payload())
    body = to_solver_rebalance_request(request).model_dump(mode="json")
    assert body == {
        "dataset_option": "NASDAQ",
        "budget": 5,
        "risk_factor": "high",
        "total_investment": 250000.0,
        "time_horizon": 3,
    }
    assert request.dataset == Dataset.NASDAQ100


@pytest.mark.parametrize(
    "value, expected",
    [(12.5, 13), (12.4999, 12), (-2.5, -3), (0.5, 1), (99.5, 100), (Decimal("14.5"), 15)],
)
def test_round_half_away_from_zero(value, expected):
    assert round_half_away_from_zero(value) == expected


def test_end_to_end_example_allocation():
    normalized = to_normalized_response(_raw(), source="solver")
    assert [entry.model_dump(by_alias=True) for entry in normalized.allocation] == [
        {"name": "X", "percentageValue": 50},
        {"name": "Y", "percentageValue": 30},
        {"name": "Z", "percentageValue": 20},
    ]
    assert normalized.selected_asset_ids == ["X", "Y", "Z"]
    assert normalized.weights == [0.5, 0.3, 0.2]
    assert normalized.expected_return is None
    assert normalized.method == "quantum"


def test_portfolio_order_is_preserved_not_sorted():
    raw = _raw(
        portfolio=[
            portfolio_entry("ZEE", 0.1),
            portfolio_entry("ACC", 0.6),
            portfolio_entry("MRF", 0.3),
        ]
    )
    normalized = to_normalized_response(raw, source="solver")
    assert normalized.selected_asset_ids == ["ZEE", "ACC", "MRF"]
    assert [entry.name for entry in normalized.allocation] == ["ZEE", "ACC", "MRF"]
    assert len(normalized.selected_asset_ids) == len(normalized.weights)
    assert len(normalized.weights) == len(normalized.allocation)


def test_reported_percentage_takes_precedence_over_weight():
    raw = _raw(
        portfolio=[
            portfolio_entry("A", 0.334, percentage=33.5),
            portfolio_entry("B", 0.125),
            portfolio_entry("C", 0.145),
        ]
    )
    allocation = to_normalized_response(raw, source="solver").allocation
    assert [entry.percentage_value for entry in allocation] == [34, 13, 15]


def test_expected_return_is_mean_of_reported_values_only():
    raw = _raw(
        portfolio=[
            portfolio_entry("A", 0.4, expected_return=0.10),
            portfolio_entry("B", 0.4),
            portfolio_entry("C", 0.2, expected_return=0.20),
        ]
    )
    normalized = to_normalized_response(raw, source="solver")
    assert normalized.expected_return == pytest.approx(0.15)


def test_expected_return_stays_finite_for_values_near_float_limit():
    raw = _raw(
        portfolio=[
            portfolio_entry("A", 0.5, expected_return=1e308),
            portfolio_entry("B", 0.5, expected_return=1e308),
        ]
    )
    normalized = to_normalized_response(raw, source="solver")
    assert normalized.expected_return == pytest.approx(1e308)
    assert json.loads(normalized.model_dump_json(by_alias=True))["expectedReturn"] is not None


def test_run_id_comes_from_solver_when_reported():
    normalized = to_normalized_response(_raw(run_id="solver-run-42"), source="solver")
    assert normalized.run_id == "solver-run-42"


def test_run_id_is_generated_when_solver_omits_it():
    first = to_normalized_response(_raw(), source="solver")
    second = to_normalized_response(_raw(), source="solver")
    assert first.run_id.startswith("run_")
    assert first.run_id != second.run_id


def test_mapping_is_idempotent_apart_from_run_id():
    raw = _raw(objective_value=-0.42, gamma=0.5)
    first = to_normalized_response(raw, source="solver").model_dump(mode="json", by_alias=True)
    second = to_normalized_response(raw, source="solver").model_dump(mode="json", by_alias=True)
    first.pop("runId")
    second.pop("runId")
    assert json.dumps(first, sort_keys=False) == json.dumps(second, sort_keys=False)


def test_diagnostics_carry_solver_metadata_opaquely():
    raw = _raw(objective_value=-0.42, gamma=0.5, qaoa_layers=3, backend_info={"qpu": "sim"})
    diagnostics = to_normalized_response(raw, source="solver").diagnostics
    assert diagnostics["backend"] == "solver"
    assert diagnostics["dataset"] == "NIFTY50"
    assert diagnostics["objectiveValue"] == -0.42
    assert diagnostics["gamma"] == 0.5
    assert diagnostics["solverExtras"] == {"qaoa_layers": 3, "backend_info": {"qpu": "sim"}}


def test_rebalance_evolution_becomes_two_day_indexed_series():
    raw = SolverRebalanceRawResponse.model_validate(raw_rebalance_response())
    normalized = to_normalized_rebalance_response(raw, source="solver")
    assert normalized.days == [1, 2, 3]
    assert [item.name for item in normalized.series] == ["quantum", "classical"]
    assert normalized.series[0].values == [250000.0, 251040.2, 252210.9]
    assert normalized.series[1].values == [250000.0, 250610.4, 251020.3]
    assert normalized.diagnostics["dataset"] == "NASDAQ"


def test_rebalance_day_falls_back_to_position_for_unlabelled_points():
    raw = SolverRebalanceRawResponse.model_validate(
        {
            "evolution": [
                {"time": "start", "Current": 1.0, "Future": 1.0},
                {"time": "Day 7", "Current": 2.0, "Future": 3.0},
            ]
        }
    )
    assert to_normalized_rebalance_response(raw, source="solver").days == [1, 7]
