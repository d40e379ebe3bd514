"""Change detection between two versions of an API description.

* :mod:`~specdocs.diff.differ` -- endpoint, schema and metadata comparison.
* :mod:`~specdocs.diff.classifier` -- breaking-change classification.
"""

from specdocs.diff.classifier import classify
from specdocs.diff.differ import diff, diff_texts, fail_safe_summary, operation_changes

__all__ = [
    "classify",
    "diff",
    "diff_texts",
    "fail_safe_summary",
    "operation_changes",
]
