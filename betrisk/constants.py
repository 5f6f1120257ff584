"""
Constants for betrisk.

Provides the model identifiers accepted by the prediction service,
the wire names for each input field, and the cluster to tier table.
"""

from typing import Dict, List, Tuple


# =============================================================================
# MODELS
# =============================================================================

# Identifiers accepted by POST /predict, in display order
MODEL_NAMES: Tuple[str, ...] = ("logreg", "randforest", "gradboost", "svm_rbf", "mlp")

MODEL_LABELS: Dict[str, str] = {
    "logreg": "Logistic Regression",
    "randforest": "Random Forest",
    "gradboost": "Gradient Boosting",
    "svm_rbf": "SVM RBF",
    "mlp": "Neural Network",
}

DEFAULT_MODEL = "logreg"


# =============================================================================
# INPUT FIELDS
# =============================================================================

# Numeric fields in submission order
NUMERIC_FIELDS: List[str] = [
    "bet",
    "total_games",
    "total_profit",
    "total_losses",
    "cashed_out",
]

INTEGER_FIELDS = frozenset({"total_games"})

INPUT_FIELDS: List[str] = NUMERIC_FIELDS + ["model_name"]

# Python attribute -> JSON key in the request body
WIRE_FIELD_NAMES: Dict[str, str] = {
    "bet": "Bet",
    "total_games": "TotalGames",
    "total_profit": "TotalProfit",
    "total_losses": "TotalLosses",
    "cashed_out": "CashedOut",
    "model_name": "model_name",
}

FIELD_LABELS: Dict[str, str] = {
    "bet": "Bet Amount",
    "total_games": "Total Games",
    "total_profit": "Total Profit",
    "total_losses": "Total Losses",
    "cashed_out": "Cashed Out",
    "model_name": "Machine Learning Model",
}


# =============================================================================
# PREDICTION ENDPOINT
# =============================================================================

PREDICT_PATH = "/predict"
JSON_HEADERS: Dict[str, str] = {"Content-Type": "application/json"}


# =============================================================================
# RISK TIERS
# =============================================================================

CLUSTER_TIERS: Dict[int, str] = {
    0: "low",
    1: "medium",
    2: "high",
}

CONFIDENCE_PERCENT_MIN = 0.0
CONFIDENCE_PERCENT_MAX = 100.0
