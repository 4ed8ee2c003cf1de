# -*- coding: utf-8 -*-
"""
Glint: Prism-coupled surface plasmon optics in thin film systems
Copyright (c) 2026 opticsWolf

SPDX-License-Identifier: LGPL-3.0-or-later

Module: material.py — Base class for optical materials.

Conventions:
  - Wavelengths are in metres everywhere in the public API.
  - A material is immutable once constructed: parameters are fixed in
    ``__init__`` and there are no caches, so every evaluation is a pure
    function of wavelength.
  - Subclasses implement ``_compute_nk`` on a validated, flat float64 array
    and return a complex128 array of the same length.
"""

import numpy as np
from typing import Any, Dict, Optional, Sequence, Tuple, Union

ArrayLike = Union[float, Sequence[float], np.ndarray]


def validate_wavelength(wavelength: ArrayLike) -> np.ndarray:
    """
    Convert a wavelength (scalar or array, metres) to a float64 array and
    check that every element is strictly positive.

    Raises:
        ValueError: If any wavelength is <= 0 or NaN.
    """
    wl = np.asarray(wavelength, dtype=np.float64)
    # NaN compares False, so it is rejected together with non-positive values
    if not np.all(wl > 0.0):
        raise ValueError(
            f"Wavelength must be positive and in metres, got {wavelength!r}"
        )
    return wl


class Material:
    """
    Base class for dispersion models: wavelength (m) → complex index n + ik.

    Subclasses must override ``_compute_nk()``.

    Attributes:
        name : str
            Optional label, used by catalogs and in ``repr``.
        params : Dict[str, Any]
            Flat dictionary of the model parameters (single source of truth,
            read through ``get_params()``).
    """

    def __init__(
        self,
        name: str = "",
        params: Optional[Dict[str, Any]] = None,
    ):
        self.name = name or ""
        self.params: Dict[str, Any] = dict(params) if params else {}

    def _compute_nk(self, wavelength: np.ndarray) -> np.ndarray:
        """Override in subclass: return n + ik for a flat array of wavelengths."""
        raise NotImplementedError(
            f"{self.__class__.__name__} must implement _compute_nk()"
        )

    def evaluate(self, wavelength_m: float) -> complex:
        """
        Complex refractive index (n + ik) at a single wavelength.

        Args:
            wavelength_m: Wavelength in metres (> 0).

        Returns:
            Python complex.

        Raises:
            ValueError: If the wavelength is not strictly positive.
        """
        wl = validate_wavelength(float(wavelength_m))
        return complex(self._compute_nk(wl.reshape(1))[0])

    def __call__(self, wavelength_m: float) -> complex:
        return self.evaluate(wavelength_m)

    def complex_refractive_index(self, wavelength: ArrayLike) -> np.ndarray:
        """
        Complex refractive index for one or many wavelengths.

        Args:
            wavelength: Wavelength(s) in metres, any shape.

        Returns:
            complex128 ndarray with the shape of ``wavelength``.
        """
        wl = validate_wavelength(wavelength)
        nk = self._compute_nk(np.ascontiguousarray(wl.ravel()))
        return nk.reshape(wl.shape)

    def get_nk(self, wavelength_m: float) -> Tuple[float, float]:
        """Return (n, k) at a single wavelength."""
        value = self.evaluate(wavelength_m)
        return value.real, value.imag

    def get_params(self) -> Dict[str, Any]:
        """
        Return a copy of material parameters.

        Returns:
            Dictionary copy of self.params.
        """
        return self.params.copy()

    def __repr__(self) -> str:
        label = f" '{self.name}'" if self.name else ""
        return f"<{self.__class__.__name__}{label}>"
