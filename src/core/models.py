"""
FILE: src/core/models.py
Client-facing request and response contracts.
"""

from enum import Enum
from typing import Annotated, Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field, ValidationInfo, field_validator, model_validator

PositiveInt = Annotated[int, Field(strict=True, gt=0)]
PositiveFiniteFloat = Annotated[float, Field(strict=True, gt=0, allow_inf_nan=False)]
UnitRatio = Annotated[float, Field(strict=True, ge=0, le=1, allow_inf_nan=False)]

NORMALIZED_METHOD = "quantum"


class Dataset(str, Enum):
    NIFTY50 = "NIFTY50"
    NASDAQ100 = "NASDAQ100"
    CRYPTO50 = "CRYPTO50"


class RiskLevel(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class Objective(str, Enum):
    SHARPE = "sharpe"
    VARIANCE = "variance"


def _validate_identifier_set(
    values: Optional[List[str]], *, field_name: str
) -> Optional[List[str]]:
    if values is None:
        return values
    seen: set[str] = set()
    for value in values:
        if not value.strip():
            raise ValueError(f"{field_name} entries must be non-empty identifiers")
        if value in seen:
            raise ValueError(f"{field_name} contains duplicate identifier '{value}'")
        seen.add(value)
    return values


class WeightConstraints(BaseModel):
    model_config = {"populate_by_name": True}

    min_weight: Optional[UnitRatio] = Field(
        default=None,
        alias="minWeight",
        description="Lower bound for any selected asset weight (0..1).",
        examples=[0.05],
    )
    max_weight: Optional[UnitRatio] = Field(
        default=None,
        alias="maxWeight",
        description="Upper bound for any selected asset weight (0..1).",
        examples=[0.4],
    )

    @model_validator(mode="after")
    def validate_bounds_order(self) -> "WeightConstraints":
        if (
            self.min_weight is not None
            and self.max_weight is not None
            and self.min_weight > self.max_weight
        ):
            raise ValueError("minWeight must be less than or equal to maxWeight")
        return self


class OptimizationRequest(BaseModel):
    model_config = {
        "populate_by_name": True,
        "json_schema_extra": {
            "example": {
                "dataset": "NIFTY50",
                "timeHorizonDays": 30,
                "riskLevel": "medium",
                "totalBudget": 100000,
                "maxAssets": 3,
                "objective": "sharpe",
            }
        },
    }

    mode: Literal["dataset"] = Field(
        default="dataset",
        description="Selection mode. Only dataset-driven selection is supported.",
    )
    dataset: Dataset = Field(description="Asset universe the solver selects from.")
    time_horizon_days: PositiveInt = Field(
        alias="timeHorizonDays",
        description="Investment horizon in days.",
        examples=[30],
    )
    risk_level: RiskLevel = Field(
        default=RiskLevel.MEDIUM,
        alias="riskLevel",
        description="Risk appetite passed to the solver.",
    )
    total_budget: PositiveFiniteFloat = Field(
        alias="totalBudget",
        description="Total money to allocate across selected assets.",
        examples=[100000],
    )
    max_assets: PositiveInt = Field(
        alias="maxAssets",
        description="Maximum number of assets the solver may select.",
        examples=[5],
    )
    objective: Objective = Field(
        default=Objective.SHARPE,
        description="Optimization objective.",
    )
    solver_params: Optional[Dict[str, Any]] = Field(
        default=None,
        alias="solverParams",
        description="Opaque solver tuning knobs (for example p, shots, optimizer, seed).",
    )
    weight_constraints: Optional[WeightConstraints] = Field(
        default=None,
        alias="weightConstraints",
        description="Optional per-asset weight bounds.",
    )
    include_list: Optional[List[str]] = Field(
        default=None,
        alias="includeList",
        description="Asset identifiers that must be part of the selection.",
    )
    exclude_list: Optional[List[str]] = Field(
        default=None,
        alias="excludeList",
        description="Asset identifiers that must not be selected.",
    )

    @field_validator("include_list")
    @classmethod
    def validate_include_list(cls, value: Optional[List[str]]) -> Optional[List[str]]:
        return _validate_identifier_set(value, field_name="includeList")

    @field_validator("exclude_list")
    @classmethod
    def validate_exclude_list(
        cls, value: Optional[List[str]], info: ValidationInfo
    ) -> Optional[List[str]]:
        value = _validate_identifier_set(value, field_name="excludeList")
        # includeList is absent from info.data when it failed its own checks
        include_list = info.data.get("include_list")
        if not value or not include_list:
            return value
        overlap = sorted(set(include_list) & set(value))
        if overlap:
            raise ValueError(
                "includeList and excludeList must not share identifiers: " + ", ".join(overlap)
            )
        return value


class RebalanceRequest(BaseModel):
    model_config = {
        "populate_by_name": True,
        "json_schema_extra": {
            "example": {
                "dataset": "NASDAQ100",
                "timeHorizonDays": 30,
                "riskLevel": "high",
                "totalBudget": 250000,
                "maxAssets": 5,
            }
        },
    }

    dataset: Dataset = Field(description="Asset universe the solver rebalances within.")
    time_horizon_days: PositiveInt = Field(
        alias="timeHorizonDays",
        description="Number of days to project the rebalanced portfolio over.",
        examples=[30],
    )
    risk_level: RiskLevel = Field(default=RiskLevel.MEDIUM, alias="riskLevel")
    total_budget: PositiveFiniteFloat = Field(alias="totalBudget", examples=[250000])
    max_assets: PositiveInt = Field(alias="maxAssets", examples=[5])


class AllocationEntry(BaseModel):
    model_config = {"populate_by_name": True}

    name: str = Field(description="Asset identifier.")
    percentage_value: int = Field(
        alias="percentageValue",
        description="Allocation share rounded to the nearest whole percent.",
    )


class NormalizedOptimizeResponse(BaseModel):
    model_config = {
        "populate_by_name": True,
        "json_schema_extra": {
            "example": {
                "runId": "run_20260218T100000000000Z_ab12cd34",
                "method": "quantum",
                "selectedAssetIds": ["X", "Y", "Z"],
                "weights": [0.5, 0.3, 0.2],
                "allocation": [
                    {"name": "X", "percentageValue": 50},
                    {"name": "Y", "percentageValue": 30},
                    {"name": "Z", "percentageValue": 20},
                ],
                "expectedReturn": None,
                "risk": None,
                "sharpe": None,
                "diagnostics": {"backend": "solver", "dataset": "NIFTY50"},
            }
        },
    }

    run_id: str = Field(alias="runId", description="Opaque identifier of this run.")
    method: Literal["quantum"] = Field(
        default=NORMALIZED_METHOD,
        description="Computation path that produced the result.",
    )
    selected_asset_ids: List[str] = Field(
        alias="selectedAssetIds",
        description="Selected assets in solver order.",
    )
    weights: List[float] = Field(description="Fractional weights aligned with selectedAssetIds.")
    allocation: List[AllocationEntry] = Field(
        description="Display allocation aligned with selectedAssetIds."
    )
    expected_return: Optional[float] = Field(
        default=None,
        alias="expectedReturn",
        description="Mean of per-asset expected returns reported by the solver, if any.",
    )
    risk: Optional[float] = Field(default=None)
    sharpe: Optional[float] = Field(default=None)
    diagnostics: Dict[str, Any] = Field(
        default_factory=dict,
        description="Pass-through solver metadata for observability. Not interpreted.",
    )

    @model_validator(mode="after")
    def validate_aligned_lengths(self) -> "NormalizedOptimizeResponse":
        if not (len(self.selected_asset_ids) == len(self.weights) == len(self.allocation)):
            raise ValueError("selectedAssetIds, weights and allocation must have equal length")
        return self


class TimeSeries(BaseModel):
    name: str = Field(description="Comparison arm name.", examples=["quantum"])
    values: List[float] = Field(description="One value per entry of days.")


class NormalizedRebalanceResponse(BaseModel):
    model_config = {
        "populate_by_name": True,
        "json_schema_extra": {
            "example": {
                "runId": "run_20260218T100000000000Z_ab12cd34",
                "method": "quantum",
                "days": [1, 2, 3],
                "series": [
                    {"name": "quantum", "values": [100000.0, 100420.5, 100910.2]},
                    {"name": "classical", "values": [100000.0, 100210.0, 100380.7]},
                ],
                "diagnostics": {"backend": "solver"},
            }
        },
    }

    run_id: str = Field(alias="runId")
    method: Literal["quantum"] = Field(default=NORMALIZED_METHOD)
    days: List[int] = Field(description="Day index of each point in the series.")
    series: List[TimeSeries] = Field(
        min_length=2,
        max_length=2,
        description="Two equal-length series, one per comparison arm.",
    )
    diagnostics: Dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="after")
    def validate_series_lengths(self) -> "NormalizedRebalanceResponse":
        for item in self.series:
            if len(item.values) != len(self.days):
                raise ValueError(f"series '{item.name}' must have one value per day")
        return self
