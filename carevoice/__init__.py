"""Clinical-training voice sessions over realtime LLM providers."""

__version__ = "0.1.0"

__all__ = ["__version__"]
