from __future__ import annotations


class PSOError(Exception):
    """Base class for fatal optimizer failures."""


class UnknownFunction(PSOError, ValueError):
    def __init__(self, name: str, known=None):
        self.name = name
        msg = f"Unknown function: {name!r}"
        if known:
            msg += f" (expected one of: {', '.join(known)})"
        super().__init__(msg)


class InvalidDimensionForFunction(PSOError, ValueError):
    def __init__(self, name: str, dim: int, required: int):
        self.name = name
        self.dim = dim
        self.required = required
        super().__init__(f"{name} is only defined for dim={required}, got dim={dim}")


class AllocationFailure(PSOError, MemoryError):
    """Swarm storage could not be allocated."""
