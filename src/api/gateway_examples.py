OPTIMIZE_REQUEST_EXAMPLE = {
    "dataset": "NIFTY50",
    "timeHorizonDays": 30,
    "riskLevel": "medium",
    "totalBudget": 100000,
    "maxAssets": 3,
    "objective": "sharpe",
    "weightConstraints": {"minWeight": 0.05, "maxWeight": 0.6},
}

REBALANCE_REQUEST_EXAMPLE = {
    "dataset": "NASDAQ100",
    "timeHorizonDays": 5,
    "riskLevel": "high",
    "totalBudget": 250000,
    "maxAssets": 5,
}

OPTIMIZE_SUCCESS_EXAMPLE = {
    "summary": "Normalized optimize result",
    "value": {
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
        "diagnostics": {"backend": "solver", "dataset": "NIFTY50", "objectiveValue": -0.42},
    },
}

REBALANCE_SUCCESS_EXAMPLE = {
    "summary": "Normalized rebalance evolution",
    "value": {
        "runId": "run_20260218T100000000000Z_ef56ab78",
        "method": "quantum",
        "days": [1, 2, 3],
        "series": [
            {"name": "quantum", "values": [250000.0, 251040.2, 252210.9]},
            {"name": "classical", "values": [250000.0, 250610.4, 251020.3]},
        ],
        "diagnostics": {"backend": "solver", "dataset": "NASDAQ"},
    },
}

VALIDATION_ERROR_EXAMPLE = {
    "summary": "Invalid payload",
    "value": {
        "error": "Invalid payload",
        "kind": "validation",
        "details": [
            "maxAssets: Input should be greater than 0",
            "dataset: Input should be 'NIFTY50', 'NASDAQ100' or 'CRYPTO50'",
        ],
    },
}

UPSTREAM_UNAVAILABLE_EXAMPLE = {
    "summary": "Solver unreachable or failing",
    "value": {"error": "Solver error 503: maintenance", "kind": "upstream_unavailable"},
}

UPSTREAM_TIMEOUT_EXAMPLE = {
    "summary": "Solver timed out",
    "value": {"error": "Solver did not respond within 60000 ms", "kind": "upstream_timeout"},
}

INTERNAL_ERROR_EXAMPLE = {
    "summary": "Solver contract drift or local defect",
    "value": {"error": "Solver response violated the agreed contract", "kind": "internal"},
}


def error_responses() -> dict:
    return {
        422: {
            "description": "Payload failed contract validation. No solver call was made.",
            "content": {"application/json": {"examples": {"validation": VALIDATION_ERROR_EXAMPLE}}},
        },
        500: {
            "description": "Solver violated its response contract or a local defect occurred.",
            "content": {"application/json": {"examples": {"internal": INTERNAL_ERROR_EXAMPLE}}},
        },
        502: {
            "description": "Solver unreachable or returned an error status.",
            "content": {
                "application/json": {"examples": {"unavailable": UPSTREAM_UNAVAILABLE_EXAMPLE}}
            },
        },
        504: {
            "description": "Solver did not answer within the configured timeout.",
            "content": {"application/json": {"examples": {"timeout": UPSTREAM_TIMEOUT_EXAMPLE}}},
        },
    }
