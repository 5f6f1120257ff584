"""Network boundary for the prediction service."""

from betrisk.client.transport import (
    PredictTransport,
    AiohttpTransport,
    RequestsTransport,
    build_transport,
)

__all__ = ["PredictTransport", "AiohttpTransport", "RequestsTransport", "build_transport"]
