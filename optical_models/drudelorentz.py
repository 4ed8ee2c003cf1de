# -*- coding: utf-8 -*-
"""
Glint: Prism-coupled surface plasmon optics in thin film systems
Copyright (c) 2026 opticsWolf

SPDX-License-Identifier: LGPL-3.0-or-later

Module: drudelorentz.py — Lorentz-Drude dielectric function for metals.

Parametrisation (Rakić et al., Appl. Opt. 37, 5271 (1998)):

    ε(ω) = ε∞ − Ωp² / (ω² + iγ_D·ω) + Σⱼ fⱼ·ωp² / (ωⱼ² − ω² − iγⱼ·ω)

with Ωp = √f0 · ωp. The Drude numerator uses the effective Ωp while every
Lorentz numerator uses the bare ωp; this asymmetry is part of the published
parametrisation.
"""

import numpy as np
from numba import njit
from scipy.constants import c as SPEED_OF_LIGHT, e as ELEMENTARY_CHARGE, hbar
from typing import Dict, Iterable, List, Tuple, Union

from .material import Material, ArrayLike, validate_wavelength

__all__ = ["LorentzDrudeMetal", "EV_TO_RAD_PER_S"]

# Photon energy (eV) → angular frequency (rad/s), ≈ 1.519267e15
EV_TO_RAD_PER_S: float = ELEMENTARY_CHARGE / hbar

Oscillator = Tuple[float, float, float]


@njit(cache=True)
def compute_lorentz_drude_eps(
    wavelength_m: np.ndarray,
    eps_inf: float,
    omega_p: float,
    omega_p_drude: float,
    gamma_d: float,
    oscillators: np.ndarray,
    c: float,
) -> np.ndarray:
    """
    Compute the complex permittivity of the Lorentz-Drude model.

    Args:
        wavelength_m: Array of vacuum wavelengths in metres
        eps_inf: High-frequency dielectric constant
        omega_p: Bare plasma frequency [rad/s], used by the Lorentz terms
        omega_p_drude: Effective plasma frequency √f0·ωp [rad/s], Drude term
        gamma_d: Drude damping [rad/s]
        oscillators: Array of shape (N, 3) with rows (f, ω0, γ) in rad/s
        c: Speed of light in vacuum [m/s]

    Returns:
        Complex permittivity array.
    """
    omega = 2.0 * np.pi * c / wavelength_m
    omega_sq = omega * omega
    eps = np.full(wavelength_m.shape, eps_inf + 0j, dtype=np.complex128)

    # Drude term: -Ωp^2 / (ω^2 + i γ_D ω)
    eps -= (omega_p_drude * omega_p_drude) / (omega_sq + 1j * (gamma_d * omega))

    # Lorentz oscillators: f ωp^2 / (ω0^2 - ω^2 - i γ ω)
    wp_sq = omega_p * omega_p
    for i in range(oscillators.shape[0]):
        f = oscillators[i, 0]
        w0 = oscillators[i, 1]
        g = oscillators[i, 2]
        eps += (f * wp_sq) / ((w0 * w0 - omega_sq) - 1j * (g * omega))

    return eps


def _validate_oscillator(strength: float, omega0: float, gamma: float,
                         label: str = "") -> None:
    """Validate physical constraints for a single oscillator."""
    prefix = f"Oscillator {label}: " if label else ""
    if not np.isfinite(strength) or strength < 0:
        raise ValueError(f"{prefix}strength must be finite and >= 0, got {strength}")
    if not np.isfinite(omega0) or omega0 < 0:
        raise ValueError(f"{prefix}resonance must be finite and >= 0, got {omega0}")
    if not np.isfinite(gamma) or gamma < 0:
        raise ValueError(f"{prefix}damping must be finite and >= 0, got {gamma}")


class LorentzDrudeMetal(Material):
    """
    Lorentz-Drude metal: free-electron (Drude) response plus bound-electron
    Lorentz oscillators.

    All frequencies are angular frequencies in rad/s; use ``from_ev`` for the
    tabulated eV parameters found in the literature.

    Attributes:
        eps_inf: High-frequency dielectric constant
        plasma_omega: Plasma frequency ωp [rad/s]
        drude_gamma: Drude damping γ_D [rad/s]
        drude_strength: Drude oscillator strength f0
        oscillators: Tuple of (f, ω0, γ) in rad/s

    Args:
        eps_inf: High-frequency dielectric constant
        omega_p: Plasma frequency [rad/s], must be positive
        gamma_drude: Drude damping [rad/s], must be non-negative
        oscillators: Iterable of (strength, omega0, gamma); may be empty
        drude_strength: f0 (default 1.0), Ωp = √f0·ωp
        name: Optional label

    Raises:
        ValueError: If invalid parameters are provided

    Example:
        >>> # Gold, Rakić 1998
        >>> gold = LorentzDrudeMetal.from_ev(
        ...     1.0, 9.03, 0.053,
        ...     [(0.024, 0.415, 0.241), (0.010, 0.830, 0.345),
        ...      (0.071, 2.969, 0.870), (0.601, 4.304, 2.494),
        ...      (4.384, 13.32, 2.214)],
        ...     drude_strength=0.760, name="Au")
        >>> gold.evaluate(600e-9)   # ≈ 0.362 + 2.849j
    """

    def __init__(
        self,
        eps_inf: float,
        omega_p: float,
        gamma_drude: float,
        oscillators: Iterable[Oscillator] = (),
        drude_strength: float = 1.0,
        name: str = "",
    ):
        eps_inf = float(eps_inf)
        omega_p = float(omega_p)
        gamma_drude = float(gamma_drude)
        drude_strength = float(drude_strength)

        if not np.isfinite(eps_inf):
            raise ValueError(f"eps_inf must be finite, got {eps_inf}")
        if not np.isfinite(omega_p) or omega_p <= 0:
            raise ValueError("Plasma frequency must be positive")
        if not np.isfinite(gamma_drude) or gamma_drude < 0:
            raise ValueError("Drude damping constant must be non-negative")
        if not np.isfinite(drude_strength) or drude_strength < 0:
            raise ValueError("Drude strength f0 must be non-negative")

        osc_params: List[Oscillator] = []
        for i, osc in enumerate(oscillators):
            if len(osc) != 3:
                raise ValueError(
                    f"Oscillator {i} must be (strength, omega0, gamma), got {osc}"
                )
            f, w0, g = (float(v) for v in osc)
            _validate_oscillator(f, w0, g, label=str(i))
            osc_params.append((f, w0, g))

        params: Dict[str, float] = {
            'eps_inf': eps_inf,
            'omega_p': omega_p,
            'gamma_drude': gamma_drude,
            'drude_strength': drude_strength,
        }
        for i, (f, w0, g) in enumerate(osc_params, start=1):
            params[f"f_{i}"] = f
            params[f"omega_{i}"] = w0
            params[f"gamma_{i}"] = g
        super().__init__(name=name, params=params)

        self._osc_params = tuple(osc_params)
        self._lorentz_params = np.array(osc_params, dtype=np.float64).reshape(-1, 3)
        self._lorentz_params.flags.writeable = False
        self._omega_p_drude = np.sqrt(drude_strength) * omega_p

    @classmethod
    def from_ev(
        cls,
        eps_inf: float,
        plasma_energy_ev: float,
        drude_gamma_ev: float,
        oscillators_ev: Iterable[Oscillator] = (),
        drude_strength: float = 1.0,
        name: str = "",
    ) -> "LorentzDrudeMetal":
        """
        Build the model from energies in eV.

        Args:
            eps_inf: High-frequency dielectric constant
            plasma_energy_ev: ħωp [eV]
            drude_gamma_ev: ħγ_D [eV]
            oscillators_ev: Iterable of (strength, resonance [eV], damping [eV])
            drude_strength: f0
            name: Optional label
        """
        osc = [
            (f, w0 * EV_TO_RAD_PER_S, g * EV_TO_RAD_PER_S)
            for f, w0, g in oscillators_ev
        ]
        return cls(
            eps_inf,
            plasma_energy_ev * EV_TO_RAD_PER_S,
            drude_gamma_ev * EV_TO_RAD_PER_S,
            osc,
            drude_strength=drude_strength,
            name=name,
        )

    @property
    def eps_inf(self) -> float:
        return self.params['eps_inf']

    @property
    def plasma_omega(self) -> float:
        return self.params['omega_p']

    @property
    def drude_gamma(self) -> float:
        return self.params['gamma_drude']

    @property
    def drude_strength(self) -> float:
        return self.params['drude_strength']

    @property
    def effective_plasma_omega(self) -> float:
        """Ωp = √f0·ωp, the plasma frequency of the Drude term."""
        return float(self._omega_p_drude)

    @property
    def oscillators(self) -> Tuple[Oscillator, ...]:
        """(strength, omega0, gamma) triples in rad/s."""
        return self._osc_params

    @property
    def n_oscillators(self) -> int:
        """Number of Lorentz oscillators."""
        return len(self._osc_params)

    def permittivity(self, wavelength: ArrayLike) -> Union[complex, np.ndarray]:
        """
        Complex permittivity ε = (n + ik)² at the given wavelength(s).

        Returns a Python complex for scalar input, otherwise a complex128
        array with the input's shape.
        """
        wl = validate_wavelength(wavelength)
        eps = self._compute_eps(np.ascontiguousarray(wl.ravel())).reshape(wl.shape)
        if eps.ndim == 0:
            return complex(eps)
        return eps

    def _compute_eps(self, wavelength: np.ndarray) -> np.ndarray:
        return compute_lorentz_drude_eps(
            wavelength,
            self.params['eps_inf'],
            self.params['omega_p'],
            self._omega_p_drude,
            self.params['gamma_drude'],
            self._lorentz_params,
            SPEED_OF_LIGHT,
        )

    def _compute_nk(self, wavelength: np.ndarray) -> np.ndarray:
        return np.sqrt(self._compute_eps(wavelength))
