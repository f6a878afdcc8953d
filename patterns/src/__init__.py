"""Pattern catalog: runnable design pattern and language idiom demos."""

__version__ = "1.0.0"
