"""Code generators for layered Go microservices, a .sprout parser and a ServiceID registry."""

__version__ = "0.0.5"

__all__ = ["__version__"]