"""reactorscan - reactor-aware analysis gate and configuration assembly."""

__version__ = "1.0.0"
