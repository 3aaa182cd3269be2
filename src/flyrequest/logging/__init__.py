"""flyrequest logging: structlog configuration."""

from flyrequest.logging.structlog_adapter import StructlogAdapter

__all__ = ["StructlogAdapter"]
