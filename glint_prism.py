# -*- coding: utf-8 -*-
r"""
Glint: Prism-coupled surface plasmon optics in thin film systems
Copyright (c) 2026 opticsWolf

SPDX-License-Identifier: LGPL-3.0-or-later

Module: glint_prism.py — Ray geometry through an isosceles coupling prism.

Cross-section (x to the right, y up, angles from the vertical bisector):

                 /\
       left leg /  \ right leg        α = prism (base) angle
               /    \
              /_α__α_\                 base, optically contacted to
             ===========               the slide carrying the sensor

A ray leaves the slide at the SPRi angle θ_spri, refracts into the prism
through the base, meets one leg and refracts into air (n = 1). The exit
direction relative to the vertical is the prism-out angle.

Every angle is obtained as atan2(x, y) of a unit direction, so the left and
right legs are mirror images and α > 90° needs no special casing. A
|sin θ| > 1 anywhere in the chain is total internal reflection and returns
NaN for the unknown angle.
"""

import math
from dataclasses import dataclass
from typing import NamedTuple, Tuple

import numpy as np

from optical_models.material import Material

__all__ = ["PrismAngles", "PrismCoupler", "solve_prism_angles", "N_AIR"]

N_AIR: float = 1.0

Vec2 = Tuple[float, float]


class PrismAngles(NamedTuple):
    """Both angles of the prism relation, in degrees."""
    spri_angle: float        # incidence at the slide → prism interface
    prism_out_angle: float   # exit direction in air


def _leg_frame(prism_angle_rad: float, side: int) -> Tuple[Vec2, Vec2]:
    """
    Outward unit normal and tangent of one leg.

    ``side`` is +1 for the right leg and −1 for the left leg. The tangent runs
    from the base corner toward the apex; the normal is that direction turned
    by 90° away from the prism interior.
    """
    ca = math.cos(prism_angle_rad)
    sa = math.sin(prism_angle_rad)
    tangent = (-side * ca, sa)
    normal = (side * sa, ca)
    return normal, tangent


def _dot(a: Vec2, b: Vec2) -> float:
    return a[0] * b[0] + a[1] * b[1]


def _refract_through_leg(direction: Vec2, prism_angle_rad: float,
                         ratio: float) -> Vec2:
    """
    Refract a unit direction at the leg it points toward.

    The tangential component is scaled by ``ratio`` (n_from / n_to) with its
    sign kept; the normal component follows from unit length. Returns
    (nan, nan) on total internal reflection.
    """
    side = 1 if direction[0] >= 0.0 else -1
    normal, tangent = _leg_frame(prism_angle_rad, side)

    sin_new = ratio * _dot(direction, tangent)
    if abs(sin_new) > 1.0:
        return (math.nan, math.nan)
    cos_new = math.sqrt(1.0 - sin_new * sin_new)

    return (cos_new * normal[0] + sin_new * tangent[0],
            cos_new * normal[1] + sin_new * tangent[1])


def _snell_deg(angle_deg: float, n_from: float, n_to: float) -> float:
    s = n_from * math.sin(math.radians(angle_deg)) / n_to
    if abs(s) > 1.0:
        return math.nan
    return math.degrees(math.asin(s))


def _direction_angle(direction: Vec2) -> float:
    return math.degrees(math.atan2(direction[0], direction[1]))


def _direction(angle_deg: float) -> Vec2:
    rad = math.radians(angle_deg)
    return (math.sin(rad), math.cos(rad))


def solve_prism_angles(
    prism_angle: float,
    n_prism: float,
    n_slide: float,
    spri_angle: float = math.nan,
    prism_out_angle: float = math.nan,
) -> PrismAngles:
    """
    Solve the prism relation for whichever angle is unknown.

    Exactly one of ``spri_angle`` and ``prism_out_angle`` must be finite; the
    other (NaN) is computed.

    Args:
        prism_angle: Base angle α of the isosceles prism [deg]
        n_prism: Refractive index of the prism (real)
        n_slide: Refractive index of the slide (real)
        spri_angle: Incidence angle at the slide → prism interface [deg]
        prism_out_angle: Exit angle in air [deg]

    Returns:
        PrismAngles with the known angle echoed and the unknown solved
        (NaN on total internal reflection).

    Raises:
        ValueError: Both or neither angle known, or non-physical indices.

    Example:
        >>> solve_prism_angles(60.0, 1.5, 1.5, spri_angle=70.0)
        PrismAngles(spri_angle=70.0, prism_out_angle=75.1...)
    """
    spri_known = np.isfinite(spri_angle)
    out_known = np.isfinite(prism_out_angle)
    if spri_known == out_known:
        raise ValueError(
            "Exactly one of spri_angle and prism_out_angle must be given "
            f"(got spri_angle={spri_angle}, prism_out_angle={prism_out_angle})"
        )
    if not np.isfinite(prism_angle):
        raise ValueError(f"prism_angle must be finite, got {prism_angle}")
    for label, value in (("n_prism", n_prism), ("n_slide", n_slide)):
        if not (np.isfinite(value) and value > 0.0):
            raise ValueError(f"{label} must be finite and > 0, got {value}")

    alpha = math.radians(float(prism_angle))

    if spri_known:
        spri_angle = float(spri_angle)
        theta_prism = _snell_deg(spri_angle, n_slide, n_prism)
        if math.isnan(theta_prism):
            return PrismAngles(spri_angle, math.nan)
        exit_dir = _refract_through_leg(_direction(theta_prism), alpha,
                                        n_prism / N_AIR)
        return PrismAngles(spri_angle, _direction_angle(exit_dir))

    prism_out_angle = float(prism_out_angle)
    inner_dir = _refract_through_leg(_direction(prism_out_angle), alpha,
                                     N_AIR / n_prism)
    if math.isnan(inner_dir[0]):
        return PrismAngles(math.nan, prism_out_angle)
    theta_prism = _direction_angle(inner_dir)
    return PrismAngles(_snell_deg(theta_prism, n_prism, n_slide), prism_out_angle)


@dataclass(frozen=True)
class PrismCoupler:
    """
    A coupling prism and slide described by dispersion models.

    Solves the prism relation at a wavelength with the real parts of both
    indices.

    Attributes:
        prism_angle: Base angle of the prism [deg]
        prism: Dispersion model of the prism glass
        slide: Dispersion model of the slide glass
    """
    prism_angle: float
    prism: Material
    slide: Material

    def indices(self, wavelength_m: float) -> Tuple[float, float]:
        """Real (n_prism, n_slide) at ``wavelength_m``."""
        return (self.prism.evaluate(wavelength_m).real,
                self.slide.evaluate(wavelength_m).real)

    def solve(self, wavelength_m: float, spri_angle: float = math.nan,
              prism_out_angle: float = math.nan) -> PrismAngles:
        n_prism, n_slide = self.indices(wavelength_m)
        return solve_prism_angles(self.prism_angle, n_prism, n_slide,
                                  spri_angle=spri_angle,
                                  prism_out_angle=prism_out_angle)

    def out_angle(self, wavelength_m: float, spri_angle: float) -> float:
        return self.solve(wavelength_m, spri_angle=spri_angle).prism_out_angle

    def spri_angle(self, wavelength_m: float, prism_out_angle: float) -> float:
        return self.solve(wavelength_m, prism_out_angle=prism_out_angle).spri_angle


# ═══════════════════════════════════════════════════════════════════════════════
# Self-Test
# ═══════════════════════════════════════════════════════════════════════════════

if __name__ == "__main__":
    print("=" * 70)
    print("Glint Prism Geometry — Self-Test")
    print("=" * 70)

    print(f"\n  {'α':>5} {'θ_spri':>8} {'θ_out':>10} {'θ_spri (rev)':>14}")
    for alpha_deg in (45.0, 60.0, 72.0):
        for spri in (-70.0, 55.0, 65.0, 70.0):
            fwd = solve_prism_angles(alpha_deg, 1.5, 1.52, spri_angle=spri)
            rev = solve_prism_angles(alpha_deg, 1.5, 1.52,
                                     prism_out_angle=fwd.prism_out_angle) \
                if np.isfinite(fwd.prism_out_angle) else PrismAngles(math.nan, math.nan)
            print(f"  {alpha_deg:>5.1f} {spri:>8.2f} {fwd.prism_out_angle:>10.4f} "
                  f"{rev.spri_angle:>14.4f}")

    print("\n" + "=" * 70)
    print("All tests complete.")
