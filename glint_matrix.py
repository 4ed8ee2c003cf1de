# -*- coding: utf-8 -*-
"""
Glint: Prism-coupled surface plasmon optics in thin film systems
Copyright (c) 2026 opticsWolf

SPDX-License-Identifier: LGPL-3.0-or-later

Module: glint_matrix.py — Characteristic (transfer) matrix solver for
multilayer stacks between two semi-infinite media.

Conventions:
─────────────────────────────────────────────────────
  Geometry:
    Light arrives from the incidence medium (the prism) at θ_in, crosses the
    layers in list order and leaves into the exit medium (the analyte).

        α  = N_in · sin θ_in              (Snell invariant, conserved)
        kz = k0 · √(N² − α²)              (principal branch)

  Admittance:
        η_s = kz                          (s-polarization)
        η_p = N² / kz                     (p-polarization)
    Common factors cancel in r and t and are dropped.

  Layer matrix (δ = kz·d):
        [ cos δ        −i·sin δ / η ]
        [ −i·η·sin δ   cos δ        ]
    The stack matrix is the ordered product M = M₁·M₂·…·M_L.

  Coefficients:
        D = η_in·m11 + η_in·η_out·m12 + m21 + η_out·m22
        r = (η_in·m11 + η_in·η_out·m12 − m21 − η_out·m22) / D
        t = 2·η_in / D
        R = |r|²,   T = Re(η_out)/Re(η_in)·|t|²

  Degenerate cases:
    |D| < 1e-15 returns R = T = 0. So does |kz| ≤ 1e-15 under p-polarization
    in any medium, the incidence and exit media as well as interior layers,
    since η_p = N²/kz is then undefined. A layer with |η| ≤ 1e-15 keeps its
    diagonal and drops the −i·sin δ/η entry. T = 0 whenever Re(η_in) ≤ 1e-15 (evanescent incidence). R and T are not
    clamped to [0, 1].

References:
    [1] Born, M. & Wolf, E., Principles of Optics, 7th ed., §1.6 (1999)
    [2] Macleod, H.A., Thin-Film Optical Filters, 4th ed., ch. 2 (2010)
"""

import cmath
from dataclasses import dataclass
from typing import Dict, Iterable, List, NamedTuple, Optional, Sequence, Tuple, Union

import numpy as np
from numba import njit, prange, float64

from optical_models.material import Material, validate_wavelength

# ═══════════════════════════════════════════════════════════════════════════════
# Constants
# ═══════════════════════════════════════════════════════════════════════════════

POL_S: int = 0
POL_P: int = 1
DEGENERACY_TOL: float = 1e-15

_POL_NAMES = {"s": POL_S, "te": POL_S, "p": POL_P, "tm": POL_P}

Polarization = Union[int, str]


def parse_polarization(polarization: Polarization) -> int:
    """
    Normalise a polarization argument to POL_S or POL_P.

    Accepts the integer constants or the names 's'/'p' ('te'/'tm'),
    case-insensitive.

    Raises:
        ValueError: For anything else.
    """
    if isinstance(polarization, str):
        key = polarization.strip().lower()
        if key in _POL_NAMES:
            return _POL_NAMES[key]
    elif not isinstance(polarization, bool) and polarization in (POL_S, POL_P):
        return int(polarization)
    raise ValueError(
        f"Polarization must be 's', 'p', POL_S or POL_P, got {polarization!r}"
    )


# ═══════════════════════════════════════════════════════════════════════════════
# Stack description
# ═══════════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class Layer:
    """
    One homogeneous film of the stack.

    Attributes:
        material: Dispersion model of the film
        thickness_m: Physical thickness in metres (>= 0, finite)
        name: Optional label
    """
    material: Material
    thickness_m: float
    name: Optional[str] = None

    def __post_init__(self) -> None:
        if not isinstance(self.material, Material):
            raise TypeError(
                f"Layer material must be a Material, got "
                f"{type(self.material).__name__}"
            )
        thickness = float(self.thickness_m)
        if not np.isfinite(thickness) or thickness < 0.0:
            raise ValueError(
                f"Layer thickness must be finite and >= 0, got {self.thickness_m!r}"
            )
        object.__setattr__(self, "thickness_m", thickness)


LayerLike = Union[Layer, Tuple[Material, float]]


def as_layers(layers: Iterable[LayerLike]) -> Tuple[Layer, ...]:
    """Normalise a stack given as Layer objects or (material, thickness) pairs."""
    out: List[Layer] = []
    for item in layers:
        if isinstance(item, Layer):
            out.append(item)
        else:
            material, thickness = item
            out.append(Layer(material, thickness))
    return tuple(out)


class ReflectionTransmission(NamedTuple):
    """Result of a single-point solve."""
    theta_out_deg: float   # real part of the refraction angle in the exit medium
    reflectance: float
    transmittance: float


# ═══════════════════════════════════════════════════════════════════════════════
# Numba kernels
# ═══════════════════════════════════════════════════════════════════════════════

@njit(cache=True, inline='always')
def wavevector_admittance(n, k0, alpha, pol):
    """
    Normal wavevector component and optical admittance of one medium.

    Args:
        n (complex): Refractive index of the medium
        k0 (float): Vacuum wavenumber 2π/λ
        alpha (complex): Snell invariant N_in·sin θ_in
        pol (int): POL_S or POL_P

    Returns:
        (kz, eta, ok): ok is False when the p-admittance n²/kz is undefined.
    """
    kz = k0 * cmath.sqrt(n * n - alpha * alpha)
    if pol == POL_S:
        return kz, kz, True
    if abs(kz) <= DEGENERACY_TOL:
        return kz, 0j, False
    return kz, (n * n) / kz, True


@njit(cache=True)
def solve_characteristic_matrix(k0, alpha, n_in, n_layers, d_layers, n_out, pol):
    """
    Reflection and transmission of a stack via the characteristic matrix.

    Args:
        k0 (float): Vacuum wavenumber [1/m]
        alpha (complex): Snell invariant
        n_in (complex): Index of the incidence medium
        n_layers (complex128[:]): Indices of the films, incidence side first
        d_layers (float64[:]): Film thicknesses [m]
        n_out (complex): Index of the exit medium
        pol (int): POL_S or POL_P

    Returns:
        (r, t, R, T). Degenerate configurations give (0, 0, 0.0, 0.0).
    """
    _, eta_in, ok_in = wavevector_admittance(n_in, k0, alpha, pol)
    _, eta_out, ok_out = wavevector_admittance(n_out, k0, alpha, pol)
    if not (ok_in and ok_out):
        return 0j, 0j, 0.0, 0.0

    m11 = 1.0 + 0j
    m12 = 0j
    m21 = 0j
    m22 = 1.0 + 0j

    for j in range(n_layers.shape[0]):
        kz, eta, ok = wavevector_admittance(n_layers[j], k0, alpha, pol)
        if not ok:
            return 0j, 0j, 0.0, 0.0

        delta = kz * d_layers[j]
        cos_d = cmath.cos(delta)
        sin_d = cmath.sin(delta)

        if abs(eta) > DEGENERACY_TOL:
            b = -1j * sin_d / eta
        else:
            b = 0j
        c = -1j * eta * sin_d

        # M ← M · L
        p11 = m11 * cos_d + m12 * c
        p12 = m11 * b + m12 * cos_d
        p21 = m21 * cos_d + m22 * c
        p22 = m21 * b + m22 * cos_d
        m11, m12, m21, m22 = p11, p12, p21, p22

    front = eta_in * m11 + eta_in * eta_out * m12
    back = m21 + eta_out * m22
    denom = front + back
    if abs(denom) < DEGENERACY_TOL:
        return 0j, 0j, 0.0, 0.0

    r = (front - back) / denom
    t = 2.0 * eta_in / denom

    R = r.real * r.real + r.imag * r.imag
    if eta_in.real > DEGENERACY_TOL:
        T = eta_out.real / eta_in.real * (t.real * t.real + t.imag * t.imag)
    else:
        T = 0.0
    return r, t, R, T


@njit(parallel=True, cache=True)
def core_engine_photometry(k0_arr, sin_theta_arr, n_stack, d_layers, calc_s, calc_p):
    """
    Reflectance and transmittance over a wavelength × angle grid.

    Every grid point is independent; the flattened index is distributed
    with prange.

    Args:
        k0_arr (float64[:]): Vacuum wavenumbers, one per wavelength
        sin_theta_arr (float64[:]): sin θ_in, one per angle
        n_stack (complex128[:, :]): Shape (n_wavs, n_layers + 2); column 0 is
            the incidence medium, the last column the exit medium
        d_layers (float64[:]): Film thicknesses [m]
        calc_s (int): 1 to solve s-polarization
        calc_p (int): 1 to solve p-polarization

    Returns:
        Rs, Rp, Ts, Tp: 2D arrays [num_angles, num_wavs].
    """
    num_wavs = k0_arr.shape[0]
    num_angles = sin_theta_arr.shape[0]
    total_points = num_wavs * num_angles
    last = n_stack.shape[1] - 1

    Rs_out = np.zeros((num_angles, num_wavs), dtype=float64)
    Rp_out = np.zeros((num_angles, num_wavs), dtype=float64)
    Ts_out = np.zeros((num_angles, num_wavs), dtype=float64)
    Tp_out = np.zeros((num_angles, num_wavs), dtype=float64)

    for k in prange(total_points):
        a = k // num_wavs
        w = k % num_wavs

        n_in = n_stack[w, 0]
        n_out = n_stack[w, last]
        films = n_stack[w, 1:last]
        alpha = n_in * sin_theta_arr[a]

        if calc_s == 1:
            _, _, R, T = solve_characteristic_matrix(
                k0_arr[w], alpha, n_in, films, d_layers, n_out, POL_S)
            Rs_out[a, w] = R
            Ts_out[a, w] = T

        if calc_p == 1:
            _, _, R, T = solve_characteristic_matrix(
                k0_arr[w], alpha, n_in, films, d_layers, n_out, POL_P)
            Rp_out[a, w] = R
            Tp_out[a, w] = T

    return Rs_out, Rp_out, Ts_out, Tp_out


# ═══════════════════════════════════════════════════════════════════════════════
# Single-point solver
# ═══════════════════════════════════════════════════════════════════════════════

def compute_reflection_transmission(
    wavelength_m: float,
    material_in: Material,
    layers: Iterable[LayerLike],
    material_out: Material,
    theta_in_deg: float,
    polarization: Polarization,
) -> ReflectionTransmission:
    """
    Reflectance, transmittance and refraction angle of a layered stack.

    Args:
        wavelength_m: Vacuum wavelength in metres (> 0)
        material_in: Incidence medium (e.g. the prism glass)
        layers: Films in propagation order, as Layer or (material, thickness)
        material_out: Exit medium (e.g. the analyte)
        theta_in_deg: Angle of incidence in the incidence medium [deg]
        polarization: 's'/'p' or POL_S/POL_P

    Returns:
        ReflectionTransmission(theta_out_deg, reflectance, transmittance)

    Raises:
        ValueError: Non-positive wavelength, bad polarization or layer.
    """
    pol = parse_polarization(polarization)
    stack = as_layers(layers)
    wavelength_m = float(validate_wavelength(float(wavelength_m)))

    theta = np.radians(float(theta_in_deg))
    k0 = 2.0 * np.pi / wavelength_m

    n_in = material_in.evaluate(wavelength_m)
    n_out = material_out.evaluate(wavelength_m)
    alpha = n_in * np.sin(theta)

    theta_out_deg = float(np.degrees(cmath.asin(alpha / n_out).real))

    n_layers = np.array(
        [layer.material.evaluate(wavelength_m) for layer in stack],
        dtype=np.complex128,
    )
    d_layers = np.array([layer.thickness_m for layer in stack], dtype=np.float64)

    _, _, R, T = solve_characteristic_matrix(
        k0, complex(alpha), complex(n_in), n_layers, d_layers, complex(n_out), pol
    )
    return ReflectionTransmission(theta_out_deg, float(R), float(T))


# ═══════════════════════════════════════════════════════════════════════════════
# Python Class Wrapper
# ═══════════════════════════════════════════════════════════════════════════════

class GlintTransferMatrix:
    """
    Grid solver for one stack over many wavelengths and angles.

    Material indices are evaluated once per wavelength on construction; each
    ``compute_RT`` call then runs the parallel kernel over the full grid.
    Every grid point equals ``compute_reflection_transmission`` at the same
    wavelength, angle and polarization.

    Parameters:
        material_in: Incidence medium
        layers: Films in propagation order
        material_out: Exit medium
        wavelengths_m: float or 1D array of wavelengths [m]
        theta_deg: float or 1D array of incidence angles [deg]
    """

    def __init__(self, material_in: Material, layers: Iterable[LayerLike],
                 material_out: Material, wavelengths_m, theta_deg):
        self.layers = as_layers(layers)
        self.material_in = material_in
        self.material_out = material_out

        self.wavls = np.ascontiguousarray(
            validate_wavelength(np.atleast_1d(wavelengths_m)).ravel()
        )
        self.theta_deg = np.atleast_1d(np.asarray(theta_deg, dtype=np.float64)).ravel()
        self.sin_theta_arr = np.ascontiguousarray(np.sin(np.radians(self.theta_deg)))
        self.num_angles = len(self.sin_theta_arr)

        columns = [material_in.complex_refractive_index(self.wavls)]
        columns += [layer.material.complex_refractive_index(self.wavls)
                    for layer in self.layers]
        columns.append(material_out.complex_refractive_index(self.wavls))
        self.n_stack = np.ascontiguousarray(np.stack(columns, axis=1),
                                            dtype=np.complex128)
        self.thicknesses = np.ascontiguousarray(
            [layer.thickness_m for layer in self.layers], dtype=np.float64
        )
        self.k0_arr = 2.0 * np.pi / self.wavls

    def _squeeze(self, arr):
        """Remove angle dimension if only one angle was provided."""
        return arr[0, :] if self.num_angles == 1 else arr

    def compute_RT(self, mode='u') -> Dict[str, np.ndarray]:
        """
        Reflectance and transmittance over the grid.

        Args:
            mode (str): 's', 'p', or 'u' (default = unpolarized = both).

        Returns:
            dict with keys depending on mode:
                's': 'Rs', 'Ts'
                'p': 'Rp', 'Tp'
                'u'/'both': 'Rs', 'Rp', 'Ts', 'Tp', 'Ru', 'Tu'

            All arrays are 2D [num_angles, num_wavs], or 1D [num_wavs] if
            only one angle was provided.
        """
        key = mode.lower()
        if key not in ('s', 'p', 'u', 'both'):
            raise ValueError(f"mode must be 's', 'p' or 'u', got {mode!r}")
        calc_s = np.int32(1 if key in ('s', 'u', 'both') else 0)
        calc_p = np.int32(1 if key in ('p', 'u', 'both') else 0)

        Rs, Rp, Ts, Tp = core_engine_photometry(
            self.k0_arr, self.sin_theta_arr, self.n_stack, self.thicknesses,
            calc_s, calc_p
        )

        res = {}
        if calc_s:
            res['Rs'] = self._squeeze(Rs)
            res['Ts'] = self._squeeze(Ts)
        if calc_p:
            res['Rp'] = self._squeeze(Rp)
            res['Tp'] = self._squeeze(Tp)
        if calc_s and calc_p:
            res['Ru'] = self._squeeze((Rs + Rp) / 2.0)
            res['Tu'] = self._squeeze((Ts + Tp) / 2.0)
        return res


# ═══════════════════════════════════════════════════════════════════════════════
# Self-Test
# ═══════════════════════════════════════════════════════════════════════════════

if __name__ == "__main__":
    import time

    from glint_catalog import default_catalog
    from optical_models import Konstant

    print("=" * 70)
    print("Glint Transfer-Matrix Solver — Self-Test")
    print("=" * 70)

    catalog = default_catalog()
    prism = catalog["N-SF11"]
    gold = catalog["Au"]
    water = Konstant(1.333, name="Water")
    wl = 660e-9

    # ──────────────────────────────────────────────────────────────────────
    # TEST 0: Bare interface against the Fresnel formulas
    # ──────────────────────────────────────────────────────────────────────
    print("\n[TEST 0] Bare glass → water interface")
    print("-" * 50)
    n1 = prism.evaluate(wl).real
    n2 = water.evaluate(wl).real
    for ang in (0.0, 30.0, 45.0):
        res = compute_reflection_transmission(wl, prism, [], water, ang, "s")
        c1 = np.cos(np.radians(ang))
        c2 = np.sqrt(1 - (n1 / n2 * np.sin(np.radians(ang))) ** 2 + 0j).real
        rs = (n1 * c1 - n2 * c2) / (n1 * c1 + n2 * c2)
        ok = abs(res.reflectance - rs ** 2) < 1e-12
        print(f"  {ang:5.1f}°  R={res.reflectance:.6f}  Fresnel={rs ** 2:.6f}  "
              f"R+T={res.reflectance + res.transmittance:.6f}  {'✓' if ok else '✗'}")

    # ──────────────────────────────────────────────────────────────────────
    # TEST 1: SPR dip, 45 nm Au on N-SF11 in water
    # ──────────────────────────────────────────────────────────────────────
    print(f"\n[TEST 1] SPR curve (N-SF11 | 45 nm Au | water, {wl * 1e9:.0f} nm)")
    print("-" * 50)
    angles = np.arange(40.0, 85.0 + 1e-9, 0.1)
    stack = [Layer(gold, 45e-9, "Au")]

    t0 = time.time()
    grid = GlintTransferMatrix(prism, stack, water, wl, angles)
    res = grid.compute_RT('u')
    print(f"  Compilation + sweep: {time.time() - t0:.3f}s")

    Rp = res['Rp'][:, 0]
    i_min = int(np.argmin(Rp))
    print(f"  Resonance: θ = {angles[i_min]:.1f}°, Rp = {Rp[i_min]:.4f}")
    print(f"  All finite: {np.all(np.isfinite(Rp))}")

    point = compute_reflection_transmission(wl, prism, stack, water,
                                            angles[i_min], "p")
    print(f"  Scalar check: Rp = {point.reflectance:.4f} "
          f"(Δ = {abs(point.reflectance - Rp[i_min]):.1e})")

    print("\n" + "=" * 70)
    print("All tests complete.")
