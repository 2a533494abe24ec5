"""Project structure analyzer for existing generated trees."""

from archgen.analyzer.structure import (
    CLASSIFICATION_RULES,
    REQUIRED_FOLDERS,
    FileRole,
    ProjectAnalyzer,
    classify_path,
    infer_patterns,
)

__all__ = [
    "CLASSIFICATION_RULES",
    "REQUIRED_FOLDERS",
    "FileRole",
    "ProjectAnalyzer",
    "classify_path",
    "infer_patterns",
]
