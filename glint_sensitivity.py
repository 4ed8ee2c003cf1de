# -*- coding: utf-8 -*-
"""
Glint: Prism-coupled surface plasmon optics in thin film systems
Copyright (c) 2026 opticsWolf

SPDX-License-Identifier: LGPL-3.0-or-later

Module: glint_sensitivity.py — Detection sensitivity of an SPRi configuration.

The sensitivity is the finite-difference response of the p-polarized
reflectance to a small real increase Δ of the analyte index:

    S_abs = (R(n_out + Δ) − R(n_out)) / Δn
    S_rel = (R(n_out + Δ) − R(n_out)) / R(n_out) / Δn

with Δn = Re[(n_out + Δ) − n_out] as actually represented in floating point.
The default Δ = 1e-6 is one Biacore resonance unit (RU).
"""

import numbers
from typing import Iterable

import numpy as np

from glint_matrix import (
    POL_P,
    GlintTransferMatrix,
    LayerLike,
    as_layers,
    compute_reflection_transmission,
)
from optical_models.basic import AnalyticMaterial
from optical_models.material import Material

__all__ = ["spri_sensitivity", "sensitivity_curve", "perturbed_material",
           "RESONANCE_UNIT"]

# One Biacore resonance unit in refractive index units
RESONANCE_UNIT: float = 1e-6

MIN_REFLECTANCE: float = 1e-15
MIN_INDEX_STEP: float = 1e-20


def _check_index_step(index_step) -> float:
    if isinstance(index_step, bool) or not isinstance(index_step, numbers.Real):
        raise TypeError(
            f"index_step must be a real number, got {type(index_step).__name__}"
        )
    step = float(index_step)
    if not np.isfinite(step):
        raise ValueError(f"index_step must be finite, got {index_step!r}")
    return step


def perturbed_material(material: Material, index_step: float) -> Material:
    """Return ``material`` with a real offset added to its index at every λ."""
    step = _check_index_step(index_step)
    label = f"{material.name or 'material'}+{step:g}"
    return AnalyticMaterial(lambda wl: material.evaluate(wl) + step, name=label)


def spri_sensitivity(
    material_in: Material,
    layers: Iterable[LayerLike],
    material_out: Material,
    wavelength_m: float,
    theta_in_deg: float,
    absolute: bool = False,
    index_step: float = RESONANCE_UNIT,
) -> float:
    """
    Sensitivity of the p-polarized reflectance to the analyte index.

    Args:
        material_in: Incidence medium (prism)
        layers: Films in propagation order
        material_out: Analyte medium that is perturbed
        wavelength_m: Vacuum wavelength [m]
        theta_in_deg: Angle of incidence in the prism [deg]
        absolute: Return dR/dn instead of (dR/R)/dn
        index_step: Real index increment Δ (default 1 RU)

    Returns:
        Sensitivity in RIU⁻¹. NaN when the relative form is requested at a
        baseline reflectance below 1e-15, or when the index step vanishes
        in floating point (|Δn| < 1e-20).

    Raises:
        TypeError: If ``index_step`` is not a real number.
        ValueError: If ``index_step`` is not finite, or on solver argument
            errors (wavelength, layers).
    """
    shifted = perturbed_material(material_out, index_step)
    stack = as_layers(layers)

    r0 = compute_reflection_transmission(
        wavelength_m, material_in, stack, material_out, theta_in_deg, POL_P
    ).reflectance
    r1 = compute_reflection_transmission(
        wavelength_m, material_in, stack, shifted, theta_in_deg, POL_P
    ).reflectance

    delta_r = r1 - r0
    if absolute:
        change = delta_r
    elif r0 < MIN_REFLECTANCE:
        return float("nan")
    else:
        change = delta_r / r0

    delta_n = (shifted.evaluate(wavelength_m)
               - material_out.evaluate(wavelength_m)).real
    if abs(delta_n) < MIN_INDEX_STEP:
        return float("nan")

    return change / delta_n


def sensitivity_curve(
    material_in: Material,
    layers: Iterable[LayerLike],
    material_out: Material,
    wavelength_m: float,
    angles_deg,
    absolute: bool = False,
    index_step: float = RESONANCE_UNIT,
) -> np.ndarray:
    """
    ``spri_sensitivity`` over an angle sweep, solved on the grid engine.

    Args:
        angles_deg: 1D array of incidence angles [deg]
        (other arguments as in ``spri_sensitivity``)

    Returns:
        float64 array with one sensitivity per angle, NaN where undefined.
    """
    shifted = perturbed_material(material_out, index_step)
    stack = as_layers(layers)
    angles = np.atleast_1d(np.asarray(angles_deg, dtype=np.float64)).ravel()

    r0 = GlintTransferMatrix(material_in, stack, material_out,
                             wavelength_m, angles).compute_RT('p')['Rp']
    r1 = GlintTransferMatrix(material_in, stack, shifted,
                             wavelength_m, angles).compute_RT('p')['Rp']
    r0 = np.asarray(r0, dtype=np.float64).reshape(angles.shape)
    r1 = np.asarray(r1, dtype=np.float64).reshape(angles.shape)

    delta_n = (shifted.evaluate(wavelength_m)
               - material_out.evaluate(wavelength_m)).real
    if abs(delta_n) < MIN_INDEX_STEP:
        return np.full(angles.shape, np.nan)

    delta_r = r1 - r0
    if absolute:
        return delta_r / delta_n

    out = np.full(angles.shape, np.nan)
    valid = r0 >= MIN_REFLECTANCE
    out[valid] = delta_r[valid] / r0[valid] / delta_n
    return out


# ═══════════════════════════════════════════════════════════════════════════════
# Self-Test
# ═══════════════════════════════════════════════════════════════════════════════

if __name__ == "__main__":
    from glint_catalog import default_catalog
    from optical_models import Konstant

    print("=" * 70)
    print("Glint SPRi Sensitivity — Self-Test")
    print("=" * 70)

    catalog = default_catalog()
    prism = catalog["N-SF11"]
    stack = [(catalog["Au"], 47e-9)]
    water = Konstant(1.333, name="Water")
    wl = 660e-9

    angles = np.arange(50.0, 60.0 + 1e-9, 0.5)
    curve = sensitivity_curve(prism, stack, water, wl, angles)

    print(f"\n  {'θ (°)':<8} {'S_rel (1/RIU)':>16} {'S_abs (1/RIU)':>16}")
    for ang, s_rel in zip(angles, curve):
        s_abs = spri_sensitivity(prism, stack, water, wl, ang, absolute=True)
        print(f"  {ang:<8.1f} {s_rel:>16.3f} {s_abs:>16.3f}")

    print("\n  Vanishing step (1e-21):",
          spri_sensitivity(prism, stack, water, wl, 55.0, index_step=1e-21))

    print("\n" + "=" * 70)
    print("All tests complete.")
