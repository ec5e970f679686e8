"""disease.sh API client and endpoint wrappers."""

from covid_trends.provider.api import (
    ALL_COUNTRIES,
    DiseaseAPI,
    extract_timeline,
    historical_path,
)
from covid_trends.provider.http import (
    ProviderClient,
    ProviderDataError,
    ProviderHTTPError,
    ProviderResponse,
    ProviderStatusError,
)

__all__ = [
    "ALL_COUNTRIES",
    # Endpoints
    "DiseaseAPI",
    # HTTP Client
    "ProviderClient",
    "ProviderDataError",
    "ProviderHTTPError",
    "ProviderResponse",
    "ProviderStatusError",
    "extract_timeline",
    "historical_path",
]
