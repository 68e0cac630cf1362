"""Configuration shared by the line search and the quasi-Newton drivers."""

from __future__ import annotations

import numbers
from dataclasses import dataclass, fields, replace
from typing import Any

__all__ = ["OptimizerConfig"]

_ALIASES = {"capacity": "history_size"}


@dataclass(frozen=True, slots=True)
class OptimizerConfig:
    """Tunables of a quasi-Newton run.

    Attributes
    ----------
    sufficient_decrease:
        Armijo constant ``c1`` used by the backtracking line search.
    shrink_factor:
        Multiplicative step reduction applied after each rejected trial step.
    initial_shrink_factor:
        Step reduction used by the line search of the first outer iteration,
        which has no information about the scale of the problem yet.
    underflow_threshold:
        Smallest trial step before the line search gives up.
    max_iters:
        Iteration budget of the outer loop.
    history_size:
        Number of ``(s, y)`` pairs kept by the limited-memory approximation.
    epsilon:
        Absolute tolerance on the change of the objective value between two
        iterates.
    """

    sufficient_decrease: float = 1.0e-4
    shrink_factor: float = 0.1
    initial_shrink_factor: float = 0.5
    underflow_threshold: float = 1.0e-20
    max_iters: int = 50
    history_size: int = 9
    epsilon: float = 1.0e-4

    def __post_init__(self) -> None:
        if not 0.0 < self.sufficient_decrease < 1.0:
            raise ValueError("sufficient_decrease must lie in (0, 1)")
        for name in ("shrink_factor", "initial_shrink_factor"):
            value = getattr(self, name)
            if not 0.0 < value < 1.0:
                raise ValueError(f"{name} must lie in (0, 1), got {value!r}")
        if self.underflow_threshold <= 0.0:
            raise ValueError("underflow_threshold must be positive")
        if self.epsilon < 0.0:
            raise ValueError("epsilon must not be negative")
        if not isinstance(self.max_iters, numbers.Integral) or self.max_iters < 0:
            raise ValueError("max_iters must be a non-negative integer")
        if not isinstance(self.history_size, numbers.Integral) or self.history_size < 1:
            raise ValueError("history_size must be a positive integer")

    @classmethod
    def merged(cls, config: OptimizerConfig | None = None, **options: Any) -> OptimizerConfig:
        """Return *config* (or the defaults) with keyword *options* applied.

        ``capacity`` is accepted as an alias of ``history_size``.  Unknown
        option names raise :class:`TypeError`.
        """

        base = cls() if config is None else config
        if not options:
            return base

        known = {field.name for field in fields(cls)}
        overrides: dict[str, Any] = {}
        for key, value in options.items():
            name = _ALIASES.get(key, key)
            if name not in known:
                raise TypeError(f"Unknown optimizer option {key!r}")
            if name in overrides:
                raise TypeError(f"Option {name!r} given more than once")
            overrides[name] = value
        return replace(base, **overrides)

    def for_first_iteration(self) -> OptimizerConfig:
        """Configuration whose line search shrinks by ``initial_shrink_factor``."""

        return replace(self, shrink_factor=self.initial_shrink_factor)
