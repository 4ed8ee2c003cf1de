# -*- coding: utf-8 -*-
# Glint: Prism-coupled surface plasmon optics in thin film systems.
#
# Copyright (c) 2026 opticsWolf
#
# SPDX-License-Identifier: LGPL-3.0-or-later

"""
Project metadata for Glint.
"""

from typing import Final

# Metadata Definitions
__title__: Final[str] = "Glint"
__description__: Final[str] = (
    "Dispersion models and a characteristic-matrix solver for "
    "prism-coupled surface plasmon resonance imaging (SPRi)."
)
__version__: Final[str] = "0.1.0"
__author__: Final[str] = "opticsWolf"
__license__: Final[str] = "LGPL-3.0-or-later"
__copyright__: Final[str] = "Copyright (c) 2026 opticsWolf"

def metadata_summary() -> dict[str, str]:
    """Returns a dictionary of project metadata for introspection."""
    return {
        "title": __title__,
        "version": __version__,
        "license": __license__,
        "author": __author__,
        "description": __description__,
    }
