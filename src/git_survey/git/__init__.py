from .refs import resolve_branch, resolve_divergence, resolve_upstream, shorthand
from .status import collect_status

__all__ = [
    "collect_status",
    "resolve_branch",
    "resolve_divergence",
    "resolve_upstream",
    "shorthand",
]
