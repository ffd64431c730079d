"""Logistic regression by Newton-Raphson, with optional Firth bias reduction."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np


@dataclass(frozen=True)
class LogisticFitResult:
    """Outcome of a logistic fit.

    ``beta`` is all NaN when the final covariance matrix held NaN values.
    """

    beta: np.ndarray
    converged: bool
    iterations: int


def _probabilities(x: np.ndarray, beta: np.ndarray, offset: np.ndarray) -> np.ndarray:
    return 1.0 / (np.exp(-(x @ beta) - offset) + 1.0)


def _inverse_sympd(matrix: np.ndarray) -> np.ndarray | None:
    """Inverse of a symmetric positive-definite matrix, or None if it is not one."""
    if not np.all(np.isfinite(matrix)):
        return None
    try:
        lower = np.linalg.cholesky(matrix)
    except np.linalg.LinAlgError:
        return None
    lower_inv = np.linalg.inv(lower)
    return lower_inv.T @ lower_inv


def fast_logistf_fit(
    x: Sequence[Sequence[float]] | np.ndarray,
    y: Sequence[float] | np.ndarray,
    weight: Sequence[float] | np.ndarray,
    offset: Sequence[float] | np.ndarray,
    firth: bool,
    init: Sequence[float] | np.ndarray,
    maxit: int = 50,
    maxstep: float = 5.0,
    gconv: float = 1e-5,
    xconv: float = 1e-5,
) -> LogisticFitResult:
    """Fit a (Firth-penalised) logistic regression starting from ``init``.

    Each Newton step is scaled down so that no coefficient moves by more than
    ``maxstep``. The fit stops as converged when ``maxit`` steps have been
    taken, or when the largest step is within ``xconv`` and every score
    component is within ``gconv``. It stops unconverged if the Fisher
    information is not positive definite.
    """
    design = np.asarray(x, dtype=float)
    if design.ndim != 2:
        raise ValueError("x must be a two-dimensional matrix")
    n, k = design.shape
    response = np.asarray(y, dtype=float)
    weights = np.asarray(weight, dtype=float)
    offsets = np.asarray(offset, dtype=float)
    beta = np.array(init, dtype=float, copy=True)
    for name, arr, size in (
        ("y", response, n),
        ("weight", weights, n),
        ("offset", offsets, n),
        ("init", beta, k),
    ):
        if arr.shape != (size,):
            raise ValueError(f"{name} must have {size} entries, got shape {arr.shape}")
    if maxit < 0:
        raise ValueError("maxit must not be negative")
    if maxstep <= 0:
        raise ValueError("maxstep must be positive")

    pi = _probabilities(design, beta, offsets)
    covariance = np.zeros((k, k))
    iterations = 0
    converged = False

    while iterations <= maxit:
        wpi_sqrt = np.sqrt(weights * pi * (1 - pi))
        residual = weights * (response - pi)
        if firth:
            weighted_design = design * (weights * wpi_sqrt)[:, np.newaxis]
            q, _ = np.linalg.qr(weighted_design, mode="reduced")
            leverage = np.sum(q * q, axis=1)
            residual = residual + leverage * (0.5 - pi)
        score = design.T @ residual

        scaled = design * wpi_sqrt[:, np.newaxis]
        inverse = _inverse_sympd(scaled.T @ scaled)
        if inverse is None:
            covariance = np.empty((0, 0))
            break
        covariance = inverse

        delta = np.nan_to_num(covariance @ score, nan=0.0)
        largest = float(np.max(np.abs(delta))) / maxstep if delta.size else 0.0
        if largest > 1:
            delta = delta / largest

        iterations += 1
        beta = beta + delta
        pi = _probabilities(design, beta, offsets)

        step = float(np.max(np.abs(delta))) if delta.size else 0.0
        if iterations == maxit or (
            step <= xconv and bool(np.all(np.abs(score) <= gconv))
        ):
            converged = True
            break

    if np.isnan(covariance).any():
        beta = np.full_like(beta, np.nan)
    return LogisticFitResult(beta=beta, converged=converged, iterations=iterations)