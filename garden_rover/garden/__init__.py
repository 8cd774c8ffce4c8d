"""
Garden Module
=============

Cell types, built-in garden templates and seeded garden generation.
"""

from .types import CellType, Cell, DEFAULT_CELL, CELL_FIELDS, normalize_cell_fields
from .templates import GardenTemplate, TEMPLATES, get_template, all_templates, load_template
from .generator import GardenGenerator, GeneratedGarden, generate_garden

__all__ = [
    'CellType',
    'Cell',
    'DEFAULT_CELL',
    'CELL_FIELDS',
    'normalize_cell_fields',
    'GardenTemplate',
    'TEMPLATES',
    'get_template',
    'all_templates',
    'load_template',
    'GardenGenerator',
    'GeneratedGarden',
    'generate_garden',
]
