# -*- coding: utf-8 -*-
"""
Glint: Prism-coupled surface plasmon optics in thin film systems
Copyright (c) 2026 opticsWolf

SPDX-License-Identifier: LGPL-3.0-or-later

Module: basic.py — Analytic, constant and tabulated refractive index materials.

  - AnalyticMaterial wraps any callable λ (m) → complex.
  - Konstant is a wavelength-independent n + ik.
  - TableMaterial interpolates sorted (λ, n + ik) samples. Outside the
    sampled range the nearest endpoint is returned unchanged; an exact hit on
    a sample returns the stored value without interpolation.
"""

import numpy as np
from numba import njit
from typing import Callable, Dict, Mapping, Optional, Sequence, Tuple, Union
from scipy.interpolate import CubicSpline, PchipInterpolator, Akima1DInterpolator

from .material import Material

__all__ = ["AnalyticMaterial", "Konstant", "TableMaterial"]

Sample = Tuple[float, complex]


@njit(cache=True)
def compute_table_linear_nk(
    wavelength: np.ndarray,
    wl_data: np.ndarray,
    nk_data: np.ndarray,
) -> np.ndarray:
    """
    Linear interpolation of tabulated complex indices.

    Real and imaginary parts are interpolated independently with the
    fractional position t = (λ − λ_left) / (λ_right − λ_left).

    Args:
        wavelength: Query wavelengths (flat, any order)
        wl_data: Sample wavelengths, strictly increasing
        nk_data: Complex samples matching wl_data

    Returns:
        Interpolated complex refractive index for every query wavelength.
    """
    out = np.empty(wavelength.shape[0], dtype=np.complex128)
    last = wl_data.shape[0] - 1

    for i in range(wavelength.shape[0]):
        wl = wavelength[i]
        if wl <= wl_data[0]:
            out[i] = nk_data[0]
        elif wl >= wl_data[last]:
            out[i] = nk_data[last]
        else:
            # First sample with wl_data[j] >= wl; 1 <= j <= last here
            j = np.searchsorted(wl_data, wl)
            if wl_data[j] == wl:
                out[i] = nk_data[j]
            else:
                left = nk_data[j - 1]
                right = nk_data[j]
                t = (wl - wl_data[j - 1]) / (wl_data[j] - wl_data[j - 1])
                out[i] = complex(
                    left.real + (right.real - left.real) * t,
                    left.imag + (right.imag - left.imag) * t,
                )
    return out


class AnalyticMaterial(Material):
    """
    Material defined by an arbitrary function of wavelength.

    Parameters:
        func: Callable taking a wavelength in metres and returning the complex
            refractive index n + ik.
        name: Optional label.

    Examples:
        mat = AnalyticMaterial(lambda wl: 1.33 + 0j, name="Water")
        mat.evaluate(660e-9)  # (1.33+0j)
    """

    def __init__(self, func: Callable[[float], complex], name: str = ""):
        if not callable(func):
            raise TypeError(
                f"AnalyticMaterial needs a callable, got {type(func).__name__}"
            )
        super().__init__(name=name)
        self._func = func

    @property
    def func(self) -> Callable[[float], complex]:
        return self._func

    def _compute_nk(self, wavelength: np.ndarray) -> np.ndarray:
        return np.array(
            [complex(self._func(float(wl))) for wl in wavelength],
            dtype=np.complex128,
        )


class Konstant(Material):
    """
    Material with constant real (n) and imaginary (k) refractive indices.

    Useful for simple media or reference materials where optical properties
    don't vary with wavelength (water at a fixed wavelength, air, index oil).

    Parameters:
        n: Real refractive index (required, must be > 0).
        k: Extinction coefficient (optional, default 0.0, must be >= 0).
        name: Optional label.
    """

    def __init__(self, n: float, k: float = 0.0, name: str = ""):
        n = float(n)
        k = float(k)
        if not n > 0:
            raise ValueError(f"Refractive index n must be > 0, got {n}")
        if not k >= 0:
            raise ValueError(f"Extinction coefficient k must be >= 0, got {k}")
        super().__init__(name=name, params={"n": n, "k": k})

    @property
    def n(self) -> float:
        """Real refractive index (read-only convenience accessor)."""
        return self.params['n']

    @property
    def k(self) -> float:
        """Extinction coefficient (read-only convenience accessor)."""
        return self.params['k']

    def _compute_nk(self, wavelength: np.ndarray) -> np.ndarray:
        return np.full(
            wavelength.shape, complex(self.params['n'], self.params['k']),
            dtype=np.complex128,
        )


class TableMaterial(Material):
    """
    Material with tabulated complex refractive index samples.

    Supports multiple interpolation methods: linear (default), cubicspline,
    pchip, akima, makima. Every method clamps to the endpoint samples outside
    the tabulated range and returns stored samples verbatim on exact hits.

    Parameters:
        samples: Sequence of (wavelength_m, n + ik) pairs, strictly increasing
            in wavelength (duplicates are rejected).
        interpolation: Interpolation method name.
        name: Optional label.

    Examples:
        mat = TableMaterial([(400e-9, 1.0 + 0j), (500e-9, 2.0 + 0j)])
        mat.evaluate(450e-9)  # (1.5+0j)

        # From an unordered mapping (sorted on construction)
        mat = TableMaterial.from_mapping({500e-9: 2.0, 400e-9: 1.0})
    """

    _SPLINES = {
        "cubicspline": lambda w, v: CubicSpline(w, v, extrapolate=False),
        "pchip": lambda w, v: PchipInterpolator(w, v, extrapolate=False),
        "akima": lambda w, v: Akima1DInterpolator(w, v, method="akima"),
        "makima": lambda w, v: Akima1DInterpolator(w, v, method="makima"),
    }

    def __init__(
        self,
        samples: Sequence[Sample],
        interpolation: str = "linear",
        name: str = "",
    ):
        super().__init__(name=name)

        pairs = list(samples)
        if not pairs:
            raise ValueError("TableMaterial needs at least one sample")

        wl = np.array([float(p[0]) for p in pairs], dtype=np.float64)
        nk = np.array([complex(p[1]) for p in pairs], dtype=np.complex128)

        if not np.all(np.isfinite(wl)) or not np.all(wl > 0.0):
            raise ValueError("Sample wavelengths must be finite and positive")
        if np.any(np.diff(wl) <= 0.0):
            raise ValueError(
                "Sample wavelengths must be strictly increasing "
                "(unsorted or duplicate wavelength found)"
            )

        interpolation = interpolation.lower()
        if interpolation != "linear" and interpolation not in self._SPLINES:
            raise ValueError(
                f"Unknown interpolation type '{interpolation}'. "
                f"Choose from: {['linear'] + list(self._SPLINES)}"
            )
        if interpolation != "linear" and wl.size < 2:
            raise ValueError(
                f"Interpolation '{interpolation}' needs at least two samples"
            )

        wl.flags.writeable = False
        nk.flags.writeable = False
        self._wl = wl
        self._nk = nk
        self.interpolation = interpolation

        self._n_interp = None
        self._k_interp = None
        if interpolation != "linear":
            build = self._SPLINES[interpolation]
            self._n_interp = build(wl, nk.real)
            self._k_interp = build(wl, nk.imag)

    @classmethod
    def from_mapping(
        cls,
        points: Mapping[float, Union[complex, float]],
        interpolation: str = "linear",
        name: str = "",
    ) -> "TableMaterial":
        """Build from a {wavelength_m: n + ik} mapping, sorted by wavelength."""
        return cls(sorted(points.items()), interpolation=interpolation, name=name)

    @property
    def wavelengths(self) -> np.ndarray:
        """Sample wavelengths in metres (read-only view)."""
        return self._wl

    @property
    def values(self) -> np.ndarray:
        """Complex samples (read-only view)."""
        return self._nk

    def __len__(self) -> int:
        return self._wl.size

    def get_params(self) -> Dict[str, object]:
        return {
            "interpolation": self.interpolation,
            "wavelength": self._wl.tolist(),
            "n": self._nk.real.tolist(),
            "k": self._nk.imag.tolist(),
        }

    def _compute_nk(self, wavelength: np.ndarray) -> np.ndarray:
        if self.interpolation == "linear":
            return compute_table_linear_nk(wavelength, self._wl, self._nk)

        clipped = np.clip(wavelength, self._wl[0], self._wl[-1])
        out = self._n_interp(clipped) + 1j * self._k_interp(clipped)
        out = np.asarray(out, dtype=np.complex128)

        # Endpoints and exact hits return stored samples verbatim
        idx = np.searchsorted(self._wl, clipped)
        idx = np.minimum(idx, self._wl.size - 1)
        exact = self._wl[idx] == clipped
        out[exact] = self._nk[idx[exact]]
        return out
