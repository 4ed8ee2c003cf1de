# -*- coding: utf-8 -*-
"""
Glint: Prism-coupled surface plasmon optics in thin film systems
Copyright (c) 2026 opticsWolf

SPDX-License-Identifier: LGPL-3.0-or-later

Dispersion models: wavelength (m) → complex refractive index n + ik.
"""

from .material import Material, validate_wavelength
from .basic import AnalyticMaterial, Konstant, TableMaterial
from .sellmeier import Sellmeier, Schott
from .drudelorentz import LorentzDrudeMetal, EV_TO_RAD_PER_S

__all__ = [
    "Material",
    "validate_wavelength",
    "AnalyticMaterial",
    "Konstant",
    "TableMaterial",
    "Sellmeier",
    "Schott",
    "LorentzDrudeMetal",
    "EV_TO_RAD_PER_S",
]
