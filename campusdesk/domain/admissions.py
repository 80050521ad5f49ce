# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Deterministic admission-chance estimator."""

from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import dataclass

from .exceptions import InvariantViolation

MAX_RATE = 95.0
FALLBACK_SCHOOL = "Other Top 50"


@dataclass(slots=True, frozen=True)
class SchoolProfile:
    name: str
    base_rate: float
    weight: float


SCHOOLS: Mapping[str, SchoolProfile] = {
    profile.name: profile
    for profile in (
        SchoolProfile("Harvard University", 4, 1.0),
        SchoolProfile("Stanford University", 4, 1.0),
        SchoolProfile("MIT", 4, 1.0),
        SchoolProfile("Yale University", 5, 0.95),
        SchoolProfile("Princeton University", 6, 0.92),
        SchoolProfile("Columbia University", 5, 0.93),
        SchoolProfile("UC Berkeley", 15, 0.85),
        SchoolProfile("UCLA", 12, 0.87),
        SchoolProfile("University of Michigan", 23, 0.80),
        SchoolProfile("NYU", 21, 0.82),
        SchoolProfile("Boston University", 25, 0.78),
        SchoolProfile(FALLBACK_SCHOOL, 30, 0.75),
    )
}


@dataclass(slots=True, frozen=True)
class ApplicantProfile:
    """Academic and extracurricular record of a single applicant."""

    gpa: float
    sat_score: int
    ec_count: int
    leadership_roles: int
    essay_quality: float
    recommendations: float

    def __post_init__(self) -> None:
        if not 0 <= self.gpa <= 4.0:
            raise InvariantViolation("gpa must be within 0..4.0", field="gpa")
        if not 400 <= self.sat_score <= 1600:
            raise InvariantViolation("sat score must be within 400..1600", field="sat_score")
        for fld in ("ec_count", "leadership_roles"):
            if getattr(self, fld) < 0:
                raise InvariantViolation("count must be >= 0", field=fld)
        for fld in ("essay_quality", "recommendations"):
            if not 0 <= getattr(self, fld) <= 10:
                raise InvariantViolation("score must be within 0..10", field=fld)


@dataclass(slots=True, frozen=True)
class AcceptanceEstimate:
    school: str
    rate: float
    base_rate: float
    gpa_bonus: float
    sat_bonus: float
    ec_bonus: float
    leadership_bonus: float
    essay_bonus: float
    recs_bonus: float

    def breakdown(self) -> dict[str, float]:
        return {
            "baseRate": self.base_rate,
            "gpaBonus": self.gpa_bonus,
            "satBonus": self.sat_bonus,
            "ecBonus": self.ec_bonus,
            "leadershipBonus": self.leadership_bonus,
            "essayBonus": self.essay_bonus,
            "recsBonus": self.recs_bonus,
        }


def _round1(value: float) -> float:
    # Half-up to one decimal; every input here is non-negative.
    return math.floor(value * 10 + 0.5) / 10


def resolve_school(name: str | None) -> SchoolProfile:
    return SCHOOLS.get(name or "", SCHOOLS[FALLBACK_SCHOOL])


def estimate_acceptance(applicant: ApplicantProfile, target_school: str | None) -> AcceptanceEstimate:
    """Score an applicant against a target school.

    Unknown schools fall back to the generic top-50 profile. Each bonus is
    scaled by the school's selectivity weight and the final rate is capped at
    95 percent.
    """

    school = resolve_school(target_school)

    gpa_bonus = max(0.0, (applicant.gpa - 3.5) * 20)
    sat_bonus = max(0.0, (applicant.sat_score - 1400) / 10)
    ec_bonus = min(applicant.ec_count * 2, 15)
    leadership_bonus = min(applicant.leadership_roles * 3, 12)
    essay_bonus = (applicant.essay_quality / 10) * 8
    recs_bonus = (applicant.recommendations / 10) * 5

    total_bonus = (
        gpa_bonus + sat_bonus + ec_bonus + leadership_bonus + essay_bonus + recs_bonus
    ) * school.weight
    rate = min(MAX_RATE, school.base_rate + total_bonus)

    return AcceptanceEstimate(
        school=school.name,
        rate=_round1(rate),
        base_rate=school.base_rate,
        gpa_bonus=_round1(gpa_bonus),
        sat_bonus=_round1(sat_bonus),
        ec_bonus=_round1(ec_bonus),
        leadership_bonus=_round1(leadership_bonus),
        essay_bonus=_round1(essay_bonus),
        recs_bonus=_round1(recs_bonus),
    )


__all__ = [
    "AcceptanceEstimate",
    "ApplicantProfile",
    "SCHOOLS",
    "SchoolProfile",
    "estimate_acceptance",
    "resolve_school",
]
