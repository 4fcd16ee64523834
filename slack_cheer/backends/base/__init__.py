from .protocol import IntegrationStore

__all__ = ["IntegrationStore"]
