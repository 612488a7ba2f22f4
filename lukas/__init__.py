"""lukas: parse human-typed search queries into expression trees."""

__version__ = "0.1.0"
