__version__ = "0.1.0"

__all__ = [
    "__version__",
    "baseline",
    "cli",
    "commands",
    "config",
    "contracts",
    "core",
    "engine",
    "providers",
    "reporting",
    "rights",
]
