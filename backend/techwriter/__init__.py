"""TechWriter dashboard core: timer engine and local persistence layer."""

__version__ = "1.0.0"
