"""Graph analysis engine for investigative case networks.

Combines curated and AI-extracted entities into one network, builds a typed
node/link graph and runs clustering, centrality, community and path analyses
over it.
"""

from case_network.config_loader import Settings, get_settings
from case_network.errors import CaseNetworkError, GraphTooLargeError, InputFormatError
from case_network.service import NetworkAnalysisService, NetworkInput

__version__ = "0.1.0"

__all__ = [
    "CaseNetworkError",
    "GraphTooLargeError",
    "InputFormatError",
    "NetworkAnalysisService",
    "NetworkInput",
    "Settings",
    "get_settings",
    "__version__",
]
