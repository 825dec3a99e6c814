from syncat.validation.diagnostic import Diagnostic, Severity
from syncat.validation.rules import ALL_RULES
from syncat.validation.validator import validate, validate_file

__all__ = ["Diagnostic", "Severity", "ALL_RULES", "validate", "validate_file"]
