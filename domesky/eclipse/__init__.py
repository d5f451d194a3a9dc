"""Eclipse classification module."""

from domesky.eclipse.alignment import (
    AlignmentResult,
    AlignmentStatus,
    angle_difference,
    classify_alignment,
    classify_shadow_alignment,
    status_label,
)

__all__ = [
    "AlignmentResult",
    "AlignmentStatus",
    "angle_difference",
    "classify_alignment",
    "classify_shadow_alignment",
    "status_label",
]
