from typing import Callable, Dict

from weavefit.analysis.engines.model_fit_engine import ModelFitEngine
from weavefit.analysis.engines.model import (
    LassoFitEngine,
    OLSFitEngine,
    RidgeFitEngine,
)
from weavefit.config.analysis_config import AnalysisConfig, ModelMethod
from weavefit.utils.errors import ConfigurationError

_ENGINE_REGISTRY: Dict[
    ModelMethod,
    Callable[[AnalysisConfig], ModelFitEngine],
] = {
    ModelMethod.OLS: lambda cfg: OLSFitEngine(cfg),
    ModelMethod.RIDGE: lambda cfg: RidgeFitEngine(cfg),
    ModelMethod.LASSO: lambda cfg: LassoFitEngine(cfg),
}


def resolve_model_fit_engine(
        method: ModelMethod | str,
        cfg: AnalysisConfig | None = None,
) -> ModelFitEngine:
    try:
        key = ModelMethod(method)
    except ValueError:
        key = None

    if key not in _ENGINE_REGISTRY:
        available = ", ".join(m.value for m in _ENGINE_REGISTRY)
        raise ConfigurationError(
            f"No ModelFitEngine for {method!r}. Available: {available}"
        )

    return _ENGINE_REGISTRY[key](cfg if cfg is not None else AnalysisConfig())
