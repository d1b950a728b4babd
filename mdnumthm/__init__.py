"""mdBook preprocessor that numbers theorems, lemmas and similar environments and links references to them."""

__version__ = "0.2.0"
__all__ = ["__version__"]