"""docmap: entity graph and test-coverage map for annotated application code."""

__version__ = "0.1.0"
