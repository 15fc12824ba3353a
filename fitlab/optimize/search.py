"""Adaptive-step stochastic local search."""

from dataclasses import dataclass, field, replace
from typing import Any, Callable, Iterator, Sequence

import numpy as np
import pandas as pd

from ..config import (
    DEFAULT_ALPHA_TOL,
    DEFAULT_GAMMA_BETTER,
    DEFAULT_GAMMA_WORSE,
    DEFAULT_ITERS,
)
from ..models.decay import decay_objective
from ..weighting import compute_weights
from .objective import ObjectiveFunc

Bounds = Sequence[tuple[float | None, float | None]]


@dataclass
class SearchState:
    """Incumbent and step scale after a given number of iterations."""

    best_x: np.ndarray
    best_value: float
    alpha: np.ndarray
    tolerance: float
    iteration: int
    aux: tuple[Any, Any]
    bounds: tuple[np.ndarray, np.ndarray] | None = None
    last_x: np.ndarray | None = None
    last_value: float = float("nan")
    last_accepted: bool = False


@dataclass
class SearchResult:
    """Results from an adaptive local search run."""

    best_params: np.ndarray
    best_value: float
    iterations_run: int
    final_tolerance: float
    alpha: np.ndarray
    maximize: bool
    stop_reason: str
    history: pd.DataFrame = field(default_factory=pd.DataFrame)

    def to_dict(self) -> dict[str, Any]:
        """Return the core outcome as a plain dict."""
        return {
            "best_params": self.best_params.copy(),
            "best_value": self.best_value,
            "iterations_run": self.iterations_run,
            "final_tolerance": self.final_tolerance,
        }

    def improvements(self) -> pd.DataFrame:
        """Return history rows where the candidate replaced the incumbent."""
        if self.history.empty:
            return self.history
        return self.history[self.history["accepted"]]

    def __repr__(self) -> str:
        return (
            f"SearchResult(\n"
            f"  best_value={self.best_value:.6g},\n"
            f"  best_params={np.array2string(self.best_params, precision=4)},\n"
            f"  iterations_run={self.iterations_run},\n"
            f"  final_tolerance={self.final_tolerance:.4g},\n"
            f"  stop_reason='{self.stop_reason}'\n"
            f")"
        )


def _normalize_bounds(
    bounds: Bounds | None,
    n_params: int,
) -> tuple[np.ndarray, np.ndarray] | None:
    """Convert (low, high) pairs to lower/upper arrays; None means open."""
    if bounds is None:
        return None
    if len(bounds) != n_params:
        raise ValueError(f"Got {len(bounds)} bounds for {n_params} parameters")
    lower = np.array([-np.inf if b[0] is None else b[0] for b in bounds], dtype=float)
    upper = np.array([np.inf if b[1] is None else b[1] for b in bounds], dtype=float)
    bad = np.flatnonzero(lower > upper)
    if len(bad):
        i = bad[0]
        raise ValueError(f"Invalid bounds for parameter {i}: lower {lower[i]} > upper {upper[i]}")
    return lower, upper


def _clip(x: np.ndarray, bounds: tuple[np.ndarray, np.ndarray] | None) -> np.ndarray:
    if bounds is None:
        return x
    return np.clip(x, bounds[0], bounds[1])


def _coordinates(aux_data) -> np.ndarray:
    """First field of every sample row."""
    if isinstance(aux_data, pd.DataFrame):
        return aux_data.iloc[:, 0].to_numpy(dtype=float)
    return np.array([row[0] for row in aux_data], dtype=float)


class AdaptiveLocalSearch:
    """
    Randomized local search around the incumbent with a self-adapting step.

    Each iteration perturbs the best point uniformly within +/- alpha/2 per
    dimension. An improvement grows every alpha by gamma_better, anything
    else shrinks it by gamma_worse. A single scalar tracker compounds the
    same factors and ends the run once it falls to alpha_tol.
    """

    def __init__(
        self,
        objective: ObjectiveFunc = decay_objective,
        maximize: bool = True,
        gamma_better: float = DEFAULT_GAMMA_BETTER,
        gamma_worse: float = DEFAULT_GAMMA_WORSE,
        alpha_tol: float = DEFAULT_ALPHA_TOL,
        bandwidth: float | str | None = None,
    ):
        """
        Args:
            objective: Scoring function objective(params, (samples, weights))
            maximize: If True, higher objective values are better
            gamma_better: Step growth factor after an improvement (> 1)
            gamma_worse: Step shrink factor otherwise (in (0, 1))
            alpha_tol: Stop once the compounded step scale drops to this
            bandwidth: Kernel bandwidth for the sample weights (see compute_weights)
        """
        if gamma_better <= 1:
            raise ValueError(f"gamma_better must be > 1, got {gamma_better}")
        if not 0 < gamma_worse < 1:
            raise ValueError(f"gamma_worse must be in (0, 1), got {gamma_worse}")
        if alpha_tol < 0:
            raise ValueError(f"alpha_tol must be non-negative, got {alpha_tol}")

        self.objective = objective
        self.maximize = maximize
        self.gamma_better = gamma_better
        self.gamma_worse = gamma_worse
        self.alpha_tol = alpha_tol
        self.bandwidth = bandwidth

    def is_better(self, candidate: float, incumbent: float) -> bool:
        """Strict improvement test; NaN/inf candidates never win."""
        if not np.isfinite(candidate):
            return False
        if np.isnan(incumbent):
            return True
        return candidate > incumbent if self.maximize else candidate < incumbent

    def _evaluate(self, x: np.ndarray, aux: tuple[Any, Any]) -> float:
        """Score a candidate; arithmetic failures count as a rejected candidate."""
        try:
            return float(self.objective(x, aux))
        except ArithmeticError:
            return float("nan")

    def initialize(
        self,
        x0,
        bounds: Bounds | None = None,
        aux_data=None,
        alpha0=None,
    ) -> SearchState:
        """
        Build the starting state: clamp x0, weight the samples, score x0.

        Errors from scoring the starting point propagate to the caller.
        """
        best_x = np.array(x0, dtype=float)
        if best_x.ndim != 1 or len(best_x) == 0:
            raise ValueError(f"x0 must be a non-empty 1-D vector, got shape {best_x.shape}")
        n = len(best_x)

        norm_bounds = _normalize_bounds(bounds, n)
        best_x = _clip(best_x, norm_bounds)

        if alpha0 is None:
            alpha = np.ones(n)
        else:
            alpha = np.array(alpha0, dtype=float)
            if alpha.shape != (n,):
                raise ValueError(f"alpha0 must have length {n}, got shape {alpha.shape}")
            if np.any(alpha <= 0):
                raise ValueError("alpha0 entries must be positive")

        if aux_data is None:
            aux = (None, None)
        else:
            weights = compute_weights(_coordinates(aux_data), self.bandwidth)
            aux = (aux_data, weights)

        best_value = float(self.objective(best_x, aux))

        return SearchState(
            best_x=best_x,
            best_value=best_value,
            alpha=alpha,
            tolerance=1.0,
            iteration=0,
            aux=aux,
            bounds=norm_bounds,
        )

    def step(self, state: SearchState, rng: np.random.Generator) -> SearchState:
        """Run one iteration and return the next state (input is left untouched)."""
        current_x = state.best_x + (rng.random(len(state.best_x)) - 0.5) * state.alpha
        current_x = _clip(current_x, state.bounds)
        current_value = self._evaluate(current_x, state.aux)

        if self.is_better(current_value, state.best_value):
            return replace(
                state,
                best_x=current_x,
                best_value=current_value,
                alpha=state.alpha * self.gamma_better,
                tolerance=state.tolerance * self.gamma_better,
                iteration=state.iteration + 1,
                last_x=current_x,
                last_value=current_value,
                last_accepted=True,
            )
        return replace(
            state,
            alpha=state.alpha * self.gamma_worse,
            tolerance=state.tolerance * self.gamma_worse,
            iteration=state.iteration + 1,
            last_x=current_x,
            last_value=current_value,
            last_accepted=False,
        )

    def iterate(
        self,
        x0,
        bounds: Bounds | None = None,
        aux_data=None,
        iters: int = DEFAULT_ITERS,
        alpha0=None,
        seed: int | np.random.Generator | None = None,
    ) -> Iterator[SearchState]:
        """
        Yield the search state after every iteration.

        Stopping consumption of the generator cancels the run; no work is
        done past the last yielded state.
        """
        if isinstance(iters, bool) or not isinstance(iters, (int, np.integer)) or iters <= 0:
            raise ValueError(f"iters must be a positive integer, got {iters!r}")

        rng = np.random.default_rng(seed)
        state = self.initialize(x0, bounds, aux_data, alpha0)

        for _ in range(iters):
            state = self.step(state, rng)
            yield state
            if state.tolerance <= self.alpha_tol:
                return

    def run(
        self,
        x0,
        bounds: Bounds | None = None,
        aux_data=None,
        iters: int = DEFAULT_ITERS,
        alpha0=None,
        seed: int | np.random.Generator | None = None,
        callback: Callable[[SearchState], bool | None] | None = None,
        record_history: bool = True,
        verbose: bool = False,
    ) -> SearchResult:
        """
        Run the search to completion.

        Args:
            x0: Starting parameter vector
            bounds: Optional (low, high) per parameter; None for an open side
            aux_data: Sample rows; the first field of each row is weighted
            iters: Iteration cap
            alpha0: Initial per-dimension step scale (default all ones)
            seed: Random seed or Generator for reproducible runs
            callback: Called with the state after each iteration; returning
                True stops the run
            record_history: Keep one history row per iteration
            verbose: Print progress updates

        Returns:
            SearchResult with the incumbent and run diagnostics
        """
        records = []
        state: SearchState | None = None
        stopped_by_callback = False

        for state in self.iterate(x0, bounds, aux_data, iters, alpha0, seed):
            if record_history:
                records.append({
                    "iteration": state.iteration,
                    "candidate_value": state.last_value,
                    "best_value": state.best_value,
                    "accepted": state.last_accepted,
                    "tolerance": state.tolerance,
                })

            if verbose and state.iteration % 100 == 0:
                print(
                    f"Iteration {state.iteration}/{iters}: "
                    f"best={state.best_value:.6g} tolerance={state.tolerance:.3g}"
                )

            if callback is not None and callback(state):
                stopped_by_callback = True
                break

        if stopped_by_callback:
            stop_reason = "callback"
        elif state.tolerance <= self.alpha_tol:
            stop_reason = "tolerance"
        else:
            stop_reason = "max_iters"

        if verbose:
            print(
                f"Stopped ({stop_reason}) after {state.iteration} iterations: "
                f"best={state.best_value:.6g}"
            )

        return SearchResult(
            best_params=state.best_x.copy(),
            best_value=state.best_value,
            iterations_run=state.iteration,
            final_tolerance=state.tolerance,
            alpha=state.alpha.copy(),
            maximize=self.maximize,
            stop_reason=stop_reason,
            history=pd.DataFrame(records),
        )


def adaptive_search(
    x0,
    bounds: Bounds | None = None,
    aux_data=None,
    iters: int = DEFAULT_ITERS,
    maximize: bool = True,
    alpha0=None,
    gamma_better: float = DEFAULT_GAMMA_BETTER,
    gamma_worse: float = DEFAULT_GAMMA_WORSE,
    alpha_tol: float = DEFAULT_ALPHA_TOL,
    objective: ObjectiveFunc = decay_objective,
    *,
    bandwidth: float | str | None = None,
    seed: int | np.random.Generator | None = None,
    callback: Callable[[SearchState], bool | None] | None = None,
    record_history: bool = True,
    verbose: bool = False,
) -> SearchResult:
    """
    Adaptive-step local search for a parameter vector.

    Sample weights are computed once from the first column of aux_data
    and passed to every objective call as aux = (aux_data, weights).

    Example:
        samples = make_decay_samples([0.5, 2, 0.2, 3, 1], times=range(11))
        result = optimize(
            x0=DECAY_MODEL.get_default_params(),
            bounds=DECAY_MODEL.bounds,
            aux_data=samples,
            iters=5000,
            maximize=False,
            seed=42,
        )
        print(result.best_params)
    """
    search = AdaptiveLocalSearch(
        objective=objective,
        maximize=maximize,
        gamma_better=gamma_better,
        gamma_worse=gamma_worse,
        alpha_tol=alpha_tol,
        bandwidth=bandwidth,
    )
    return search.run(
        x0,
        bounds=bounds,
        aux_data=aux_data,
        iters=iters,
        alpha0=alpha0,
        seed=seed,
        callback=callback,
        record_history=record_history,
        verbose=verbose,
    )


# Convenience alias
optimize = adaptive_search
