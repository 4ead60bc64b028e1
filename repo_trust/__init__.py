"""repo-trust: rank open-source packages by repository trustworthiness."""

__version__ = "0.1.0"
