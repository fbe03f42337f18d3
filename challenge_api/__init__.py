"""Challenge management API: phase timeline engine and its HTTP surface."""

__version__ = "0.1.0"
