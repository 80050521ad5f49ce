# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .admissions import AcceptanceEstimate, ApplicantProfile, SchoolProfile, estimate_acceptance
from .exceptions import InvariantViolation, InvariantViolationError

__all__ = [
    "AcceptanceEstimate",
    "ApplicantProfile",
    "SchoolProfile",
    "estimate_acceptance",
    "InvariantViolation",
    "InvariantViolationError",
]
