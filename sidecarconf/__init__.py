"""Command-line and environment configuration for a cross-chain coordination sidecar."""

__version__ = "0.1.0"

__all__ = ["args", "peer"]