# -*- coding: utf-8 -*-
"""
Glint: Prism-coupled surface plasmon optics in thin film systems
Copyright (c) 2026 opticsWolf

SPDX-License-Identifier: LGPL-3.0-or-later

Module: sellmeier.py — Dispersion formulas for transparent dielectrics (Sellmeier, Schott).

Both formulas work internally in micrometres; the public API takes metres.
"""

import numpy as np
from numba import njit
from typing import Dict, Iterable, Sequence, Tuple

from .material import Material

__all__ = ["Sellmeier", "Schott"]

_M_TO_UM: float = 1e6
_N_SCHOTT: int = 6


@njit(cache=True)
def compute_sellmeier_complex_nk(wl_um_2: np.ndarray,
                                 K: np.ndarray,
                                 L: np.ndarray) -> np.ndarray:
    """
    Compute complex refractive index from the Sellmeier equation.

    n²(λ) = 1 + Σᵢ[Kᵢλ²/(λ² - Lᵢ)]

    Args:
        wl_um_2: Array of wavelengths in µm squared
        K: Numerator coefficients (dimensionless)
        L: Denominator coefficients in µm²

    Returns:
        Principal square root of n², as complex128. Below a resonance n² can
        be negative and the index is then purely imaginary.
    """
    total = np.zeros(wl_um_2.shape[0], dtype=np.float64)
    for i in range(K.shape[0]):
        total += K[i] * wl_um_2 / (wl_um_2 - L[i])
    n_squared = 1.0 + total
    return np.sqrt(n_squared.astype(np.complex128))


@njit(cache=True)
def compute_schott_complex_nk(wl_um: np.ndarray, A: np.ndarray) -> np.ndarray:
    """
    Compute complex refractive index from the Schott power series.

    n²(λ) = A0 + A1·λ² + A2·λ⁻² + A3·λ⁻⁴ + A4·λ⁻⁶ + A5·λ⁻⁸

    Args:
        wl_um: Array of wavelengths in µm
        A: The six coefficients A0..A5

    Returns:
        Principal square root of n², as complex128.
    """
    wl2 = wl_um * wl_um
    inv2 = 1.0 / wl2
    inv4 = inv2 * inv2
    inv6 = inv4 * inv2
    inv8 = inv4 * inv4
    n_squared = (A[0] + A[1] * wl2 + A[2] * inv2 + A[3] * inv4
                 + A[4] * inv6 + A[5] * inv8)
    return np.sqrt(n_squared.astype(np.complex128))


class Sellmeier(Material):
    """
    Sellmeier dispersion model with any number of (K, L) terms.

    The Sellmeier equation describes chromatic dispersion of transparent
    materials away from their absorption resonances:
        n²(λ) = 1 + Σᵢ Kᵢ·λ² / (λ² − Lᵢ),   λ in µm

    A wavelength that lands exactly on a resonance (λ² == Lᵢ) is refused with
    ValueError rather than reported as an infinite index.

    Parameters:
        terms: Sequence of (K, L) pairs; K dimensionless, L in µm². At least
            one term is required.
        name: Optional label.

    Examples:
        # N-BK7
        bk7 = Sellmeier([(1.03961212, 0.00600069867),
                         (0.231792344, 0.0200179144),
                         (1.01046945, 103.560653)], name="N-BK7")
        bk7.evaluate(587.6e-9)  # ≈ 1.5168
    """

    def __init__(self, terms: Iterable[Tuple[float, float]], name: str = ""):
        pairs = [(float(k), float(l)) for k, l in terms]
        if not pairs:
            raise ValueError("At least one Sellmeier term must be provided")

        K = np.array([p[0] for p in pairs], dtype=np.float64)
        L = np.array([p[1] for p in pairs], dtype=np.float64)
        if not (np.all(np.isfinite(K)) and np.all(np.isfinite(L))):
            raise ValueError(f"Sellmeier terms must be finite, got {pairs}")

        params: Dict[str, float] = {}
        for i, (k, l) in enumerate(pairs, start=1):
            params[f"K{i}"] = k
            params[f"L{i}"] = l
        super().__init__(name=name, params=params)

        K.flags.writeable = False
        L.flags.writeable = False
        self._K = K
        self._L = L

    @property
    def terms(self) -> Tuple[Tuple[float, float], ...]:
        """(K, L) pairs as an immutable tuple; L in µm²."""
        return tuple(zip(self._K.tolist(), self._L.tolist()))

    def _compute_nk(self, wavelength: np.ndarray) -> np.ndarray:
        wl_um = wavelength * _M_TO_UM
        wl_um_2 = wl_um * wl_um
        if np.any(wl_um_2[:, None] - self._L[None, :] == 0.0):
            raise ValueError(
                "Sellmeier singular denominator: wavelength² equals a resonance "
                f"term L (terms={self.terms})"
            )
        return compute_sellmeier_complex_nk(wl_um_2, self._K, self._L)


class Schott(Material):
    """
    Schott power-series dispersion model.

    n²(λ) = A0 + A1·λ² + A2·λ⁻² + A3·λ⁻⁴ + A4·λ⁻⁶ + A5·λ⁻⁸,   λ in µm

    Parameters:
        coefficients: One to six coefficients A0..A5. Missing trailing
            coefficients are zero.
        name: Optional label.
    """

    def __init__(self, coefficients: Sequence[float], name: str = ""):
        values = [float(a) for a in coefficients]
        if not values:
            raise ValueError("At least one Schott coefficient must be provided")
        if len(values) > _N_SCHOTT:
            raise ValueError(
                f"Schott formula takes at most {_N_SCHOTT} coefficients, "
                f"got {len(values)}"
            )
        A = np.zeros(_N_SCHOTT, dtype=np.float64)
        A[:len(values)] = values
        if not np.all(np.isfinite(A)):
            raise ValueError(f"Schott coefficients must be finite, got {values}")

        super().__init__(
            name=name, params={f"A{i}": float(a) for i, a in enumerate(A)}
        )
        A.flags.writeable = False
        self._A = A

    @property
    def coefficients(self) -> Tuple[float, ...]:
        """A0..A5, always six values."""
        return tuple(self._A.tolist())

    def _compute_nk(self, wavelength: np.ndarray) -> np.ndarray:
        return compute_schott_complex_nk(wavelength * _M_TO_UM, self._A)
