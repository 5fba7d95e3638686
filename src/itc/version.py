"""Version information for itc."""

__version__ = "0.1.0"


def version_string() -> str:
    return f"itc v{__version__}"
