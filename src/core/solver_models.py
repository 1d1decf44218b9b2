"""
FILE: src/core/solver_models.py
Solver-side wire shapes. Requests are produced only by the mapper; responses are
untrusted until validated.
"""

from enum import Enum
from typing import Annotated, Any, Dict, List, Optional

from pydantic import BaseModel, Field

FiniteFloat = Annotated[float, Field(allow_inf_nan=False)]


class SolverDataset(str, Enum):
    NIFTY50 = "NIFTY50"
    NASDAQ = "NASDAQ"
    CRYPTO = "Crypto"


class SolverOptimizeRequest(BaseModel):
    dataset_option: SolverDataset
    budget: int = Field(description="Number of assets the solver may select.")
    risk_factor: str
    total_investment: float = Field(description="Money to allocate, in dataset currency.")
    time_horizon: int
    objective: str
    solver_params: Optional[Dict[str, Any]] = None
    min_weight: Optional[float] = None
    max_weight: Optional[float] = None
    include: Optional[List[str]] = None
    exclude: Optional[List[str]] = None


class SolverRebalanceRequest(BaseModel):
    dataset_option: SolverDataset
    budget: int
    risk_factor: str
    total_investment: float
    time_horizon: int


class SolverPortfolioEntry(BaseModel):
    asset: str = Field(min_length=1)
    weight: FiniteFloat = Field(ge=0, le=1)
    percentage: Optional[FiniteFloat] = Field(default=None, ge=0, le=100)
    expected_return: Optional[FiniteFloat] = None


class SolverRawResponse(BaseModel):
    """Optimize response as reported by the solver.

    Unknown top-level keys are kept in ``model_extra`` and surfaced as opaque
    diagnostics.
    """

    model_config = {"extra": "allow"}

    portfolio: List[SolverPortfolioEntry] = Field(min_length=1)
    dataset: Optional[str] = None
    objective_value: Optional[FiniteFloat] = None
    gamma: Optional[FiniteFloat] = None
    run_id: Optional[str] = None


class SolverEvolutionPoint(BaseModel):
    model_config = {"populate_by_name": True}

    time: str
    current: FiniteFloat = Field(alias="Current")
    future: FiniteFloat = Field(alias="Future")


class SolverRebalanceRawResponse(BaseModel):
    model_config = {"extra": "allow"}

    evolution: List[SolverEvolutionPoint] = Field(min_length=1)
    dataset: Optional[str] = None
    run_id: Optional[str] = None
