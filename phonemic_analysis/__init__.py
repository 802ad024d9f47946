"""
Phonemic Analysis: decomposition, validation and comparison of phonemic inventories

Catalogues the phonemic inventories of natural languages together with their
decomposition into a small set of elementary segments.

Core components:
1. Validation of a language's surface-to-elementary mapping table
   (completeness, minimality, complexity)
2. Cross-linguistic similarity of elementary inventories
   (Jaccard and functional Jaccard)
3. Catalogue management: seed data, CSV import/export, local cache

License: MIT
"""

__version__ = "0.1.0"

from phonemic_analysis.models import LanguageRecord, Mapping
from phonemic_analysis.similarity import SimilarityReport, compare_languages
from phonemic_analysis.store import LanguageStore
from phonemic_analysis.validation import ValidationReport, validate_language

__all__ = [
    "LanguageRecord",
    "Mapping",
    "LanguageStore",
    "ValidationReport",
    "validate_language",
    "SimilarityReport",
    "compare_languages",
]
