"""Check catalog and threshold classification."""

from src.checks.catalog import CheckCatalog, nice_disk_name
from src.checks.classifier import CLASSIFIERS, check, classify, equals, to_float, to_int
from src.checks.exceptions import CheckError, CheckEvaluationError

__all__ = [
    "CLASSIFIERS",
    "CheckCatalog",
    "CheckError",
    "CheckEvaluationError",
    "check",
    "classify",
    "equals",
    "nice_disk_name",
    "to_float",
    "to_int",
]
