"""
Integrations module - Optional framework glue.

Each submodule imports its framework lazily; install the matching extra
(e.g. ``pip install fineauth[flask]``) before importing it.
"""

__all__: list[str] = []
