# -*- coding: utf-8 -*-
"""
Glint: Prism-coupled surface plasmon optics in thin film systems
Copyright (c) 2026 opticsWolf

SPDX-License-Identifier: LGPL-3.0-or-later

Module: glint_catalog.py — Named material catalogs read from CSV tables.

Design:
  1.  MaterialProvider Protocol: the only contract a solver call site needs
      (``lookup`` + ``contains``), so any mapping-like source can be plugged
      in.
  2.  MaterialCatalog: an explicit, caller-owned registry with
      case-insensitive names. There is no module-level singleton;
      ``default_catalog()`` builds a fresh catalog on every call.
  3.  CSV readers return ordered {name: Material} dicts. Rows that cannot be
      turned into a model are skipped with a warning; they never abort the
      load.

CSV layouts (positional, header row required):

  Glass:         Glass, Code, K1, L1, K2, L2, K3, L3, A0, A1, A2, A3, A4, A5, …
                 Any complete (K, L) pair selects Sellmeier, otherwise the
                 A columns (blank → 0) give a Schott model.
  Lorentz-Drude: name, omega_p, f_0, Gamma_0, (f_j, Gamma_j, omega_j)*
                 Energies in eV, ε∞ = 1. Blank f_0 → 1, blank Gamma_0 → 0,
                 incomplete oscillator groups are ignored.
"""

from __future__ import annotations

import warnings
from pathlib import Path
from typing import (
    IO,
    Dict,
    Iterator,
    List,
    Optional,
    Protocol,
    Tuple,
    Union,
    runtime_checkable,
)

import numpy as np
import pandas as pd

from optical_models.drudelorentz import LorentzDrudeMetal
from optical_models.material import Material
from optical_models.sellmeier import Schott, Sellmeier

__all__ = [
    "MaterialProvider",
    "MaterialCatalog",
    "read_glass_catalog",
    "read_lorentz_drude_catalog",
    "load_catalog",
    "default_catalog",
    "water_model",
    "DATA_DIR",
]

DATA_DIR: Path = Path(__file__).resolve().parent / "optical_models" / "data"
DEFAULT_GLASS_CSV: Path = DATA_DIR / "glass.csv"
DEFAULT_LORENTZ_DRUDE_CSV: Path = DATA_DIR / "lorentz_drude.csv"

# Water, two-term Sellmeier (λ in µm)
WATER_TERMS: Tuple[Tuple[float, float], ...] = ((0.75831, 0.01007),
                                                (0.08495, 8.91377))

CsvSource = Union[str, Path, IO[str]]

# Positional columns of the glass table
_GLASS_K_L = ((2, 3), (4, 5), (6, 7))
_GLASS_A = range(8, 14)

# Positional columns of the Lorentz-Drude table
_LD_FIRST_OSC = 4
_LD_GROUP = 3


# ═══════════════════════════════════════════════════════════════════════════════
# 1.  MaterialProvider — pluggable material-data source
# ═══════════════════════════════════════════════════════════════════════════════
@runtime_checkable
class MaterialProvider(Protocol):
    """
    Minimal interface a material data source must satisfy.

    lookup(name) → Material, or None when the name is unknown
    contains(name) → bool
    """
    def lookup(self, name: str) -> Optional[Material]: ...
    def contains(self, name: str) -> bool: ...


# ═══════════════════════════════════════════════════════════════════════════════
# 2.  MaterialCatalog
# ═══════════════════════════════════════════════════════════════════════════════
class MaterialCatalog:
    """
    Case-insensitive name → Material registry.

    Names are compared with ``str.casefold``; the spelling used at
    registration is kept for display and iteration.

    Example:
        >>> cat = MaterialCatalog()
        >>> cat.register("N-BK7", bk7)
        >>> cat["n-bk7"] is bk7
        True
    """
    __slots__ = ("_entries",)

    def __init__(self, materials: Optional[Dict[str, Material]] = None) -> None:
        self._entries: Dict[str, Tuple[str, Material]] = {}
        if materials:
            for name, material in materials.items():
                self.register(name, material)

    @staticmethod
    def _key(name: str) -> str:
        return name.strip().casefold()

    def register(self, name: str, material: Material,
                 overwrite: bool = False) -> None:
        """
        Add ``material`` under ``name``.

        Raises:
            TypeError: If ``material`` is not a Material.
            ValueError: If ``name`` is blank, or already registered and
                ``overwrite`` is False.
        """
        if not isinstance(material, Material):
            raise TypeError(
                f"Catalog entries must be Material instances, got "
                f"{type(material).__name__}"
            )
        display = str(name).strip()
        if not display:
            raise ValueError("Material name must not be empty")
        key = self._key(display)
        if key in self._entries and not overwrite:
            raise ValueError(
                f"Material '{display}' is already registered "
                f"(as '{self._entries[key][0]}'); pass overwrite=True to replace it"
            )
        self._entries[key] = (display, material)

    def lookup(self, name: str) -> Optional[Material]:
        entry = self._entries.get(self._key(name))
        return entry[1] if entry is not None else None

    def contains(self, name: str) -> bool:
        return self._key(name) in self._entries

    def names(self) -> List[str]:
        """Display names in registration order."""
        return [display for display, _ in self._entries.values()]

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.contains(name)

    def __getitem__(self, name: str) -> Material:
        material = self.lookup(name)
        if material is None:
            raise KeyError(f"Unknown material '{name}'")
        return material

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(self.names())

    def __repr__(self) -> str:
        return f"<MaterialCatalog: {len(self)} materials>"


# ═══════════════════════════════════════════════════════════════════════════════
# 3.  CSV readers
# ═══════════════════════════════════════════════════════════════════════════════
def _read_table(source: CsvSource) -> Tuple[pd.Series, pd.DataFrame]:
    """
    Read a positional CSV table.

    Returns the stripped first column (names) and every other column coerced
    to float (blank or malformed cells become NaN).
    """
    frame = pd.read_csv(
        source,
        header=0,
        index_col=False,
        dtype=str,
        keep_default_na=False,
        skipinitialspace=True,
        skip_blank_lines=True,
    )
    names = frame.iloc[:, 0].astype(str).str.strip()
    values = frame.iloc[:, 1:].apply(pd.to_numeric, errors="coerce")
    return names, values


def _cell(values: pd.DataFrame, row: int, col: int) -> float:
    """Numeric cell at positional ``col`` (name column = 0); NaN if absent."""
    idx = col - 1
    if idx >= values.shape[1]:
        return float("nan")
    return float(values.iat[row, idx])


def _accept_name(name: str, seen: set, line: int) -> bool:
    if not name:
        warnings.warn(f"Row {line}: empty material name, row skipped",
                      stacklevel=3)
        return False
    key = name.casefold()
    if key in seen:
        warnings.warn(
            f"Row {line}: duplicate material '{name}', first occurrence kept",
            stacklevel=3,
        )
        return False
    seen.add(key)
    return True


def read_glass_catalog(source: CsvSource) -> Dict[str, Material]:
    """
    Read a glass table into Sellmeier or Schott models.

    Args:
        source: Path or open text stream of the CSV table.

    Returns:
        Ordered {name: Material}, first occurrence of each name.

    Raises:
        FileNotFoundError: If ``source`` is a path that does not exist.
    """
    names, values = _read_table(source)
    found: Dict[str, Material] = {}
    seen: set = set()

    for row, name in enumerate(names):
        line = row + 2
        if not _accept_name(name, seen, line):
            continue

        terms = []
        for k_col, l_col in _GLASS_K_L:
            k = _cell(values, row, k_col)
            l = _cell(values, row, l_col)
            if np.isfinite(k) and np.isfinite(l):
                terms.append((k, l))
        if terms:
            found[name] = Sellmeier(terms, name=name)
            continue

        coeffs = [_cell(values, row, col) for col in _GLASS_A]
        coeffs = [a if np.isfinite(a) else 0.0 for a in coeffs]
        if any(a != 0.0 for a in coeffs):
            found[name] = Schott(coeffs, name=name)
            continue

        warnings.warn(
            f"Row {line}: glass '{name}' has neither Sellmeier nor Schott "
            "coefficients, row skipped",
            stacklevel=2,
        )
    return found


def read_lorentz_drude_catalog(source: CsvSource) -> Dict[str, Material]:
    """
    Read a Lorentz-Drude metal table (eV parameters, ε∞ = 1).

    Args:
        source: Path or open text stream of the CSV table.

    Returns:
        Ordered {name: LorentzDrudeMetal}, first occurrence of each name.

    Raises:
        FileNotFoundError: If ``source`` is a path that does not exist.
    """
    names, values = _read_table(source)
    found: Dict[str, Material] = {}
    seen: set = set()
    n_cols = values.shape[1] + 1

    for row, name in enumerate(names):
        line = row + 2
        if not _accept_name(name, seen, line):
            continue

        plasma_ev = _cell(values, row, 1)
        if not np.isfinite(plasma_ev):
            warnings.warn(
                f"Row {line}: metal '{name}' has no plasma energy, row skipped",
                stacklevel=2,
            )
            continue
        f0 = _cell(values, row, 2)
        f0 = f0 if np.isfinite(f0) else 1.0
        gamma0 = _cell(values, row, 3)
        gamma0 = gamma0 if np.isfinite(gamma0) else 0.0

        oscillators = []
        for col in range(_LD_FIRST_OSC, n_cols - _LD_GROUP + 1, _LD_GROUP):
            f = _cell(values, row, col)
            gamma = _cell(values, row, col + 1)
            omega = _cell(values, row, col + 2)
            if np.isfinite(f) and np.isfinite(gamma) and np.isfinite(omega):
                oscillators.append((f, omega, gamma))

        try:
            found[name] = LorentzDrudeMetal.from_ev(
                1.0, plasma_ev, gamma0, oscillators,
                drude_strength=f0, name=name,
            )
        except ValueError as exc:
            warnings.warn(f"Row {line}: metal '{name}' skipped ({exc})",
                          stacklevel=2)
    return found


# ═══════════════════════════════════════════════════════════════════════════════
# 4.  Catalog assembly
# ═══════════════════════════════════════════════════════════════════════════════
def water_model() -> Sellmeier:
    """Two-term Sellmeier model of liquid water."""
    return Sellmeier(WATER_TERMS, name="H2O")


def load_catalog(
    glass: Optional[CsvSource] = None,
    lorentz_drude: Optional[CsvSource] = None,
    include_water: bool = True,
) -> MaterialCatalog:
    """
    Build a catalog from glass and Lorentz-Drude tables.

    Glass entries are registered first; a metal or the built-in water model
    whose name is already taken is skipped with a warning.

    Args:
        glass: Glass CSV (path or stream), or None to skip
        lorentz_drude: Lorentz-Drude CSV (path or stream), or None to skip
        include_water: Register the built-in H2O model
    """
    catalog = MaterialCatalog()
    sources = []
    if glass is not None:
        sources.append(read_glass_catalog(glass))
    if lorentz_drude is not None:
        sources.append(read_lorentz_drude_catalog(lorentz_drude))
    if include_water:
        sources.append({"H2O": water_model()})

    for materials in sources:
        for name, material in materials.items():
            if name in catalog:
                warnings.warn(
                    f"Material '{name}' already in catalog, later entry skipped",
                    stacklevel=2,
                )
                continue
            catalog.register(name, material)
    return catalog


def default_catalog() -> MaterialCatalog:
    """Catalog of the glasses and metals shipped with the package, plus H2O."""
    return load_catalog(glass=DEFAULT_GLASS_CSV,
                        lorentz_drude=DEFAULT_LORENTZ_DRUDE_CSV)


# ═══════════════════════════════════════════════════════════════════════════════
# Self-Test
# ═══════════════════════════════════════════════════════════════════════════════

if __name__ == "__main__":
    print("=" * 70)
    print("Glint Material Catalog — Self-Test")
    print("=" * 70)

    catalog = default_catalog()
    print(f"\n  {catalog!r}")
    print(f"  {'Name':<14} {'Model':<18} {'n @ 633 nm':>12} {'k @ 633 nm':>12}")
    for name in catalog:
        material = catalog[name]
        n, k = material.get_nk(633e-9)
        print(f"  {name:<14} {type(material).__name__:<18} {n:>12.5f} {k:>12.5f}")

    print(f"\n  'au' in catalog: {'au' in catalog}")
    print(f"  lookup('missing'): {catalog.lookup('missing')}")

    print("\n" + "=" * 70)
    print("All tests complete.")
