"""AI extraction gateway and JSON recovery."""

from recipe_extraction.services.extraction.exceptions import (
    ExtractionError,
    JSONRecoveryError,
)
from recipe_extraction.services.extraction.gateway import (
    ProviderStep,
    RecipeExtractionGateway,
)
from recipe_extraction.services.extraction.models import (
    ExtractionEnvelope,
    ExtractionFailure,
    ExtractionSuccess,
    FailureKind,
    ProviderAttempt,
)
from recipe_extraction.services.extraction.recovery import (
    RecoveryResult,
    recover_recipe_json,
)


__all__ = [
    "ExtractionEnvelope",
    "ExtractionError",
    "ExtractionFailure",
    "ExtractionSuccess",
    "FailureKind",
    "JSONRecoveryError",
    "ProviderAttempt",
    "ProviderStep",
    "RecipeExtractionGateway",
    "RecoveryResult",
    "recover_recipe_json",
]
