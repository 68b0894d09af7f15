"""Base0: wallet-gated AI image generation with Filecoin-backed prompt storage."""

__version__ = "0.1.0"
