# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from flask import Blueprint, Response, jsonify, request
from pydantic import ValidationError

from campusdesk.domain.admissions import ApplicantProfile, estimate_acceptance
from campusdesk.interfaces.http.dto.admissions import (AcceptanceRequestDTO,
                                                       AcceptanceResponseDTO)
from campusdesk.shared.errors.validation import raise_validation_error


class AdmissionsController:
    def calculate(self) -> tuple[Response, int]:
        try:
            dto = AcceptanceRequestDTO.model_validate(request.get_json(silent=True) or {})
        except ValidationError as exc:
            raise_validation_error(exc)

        applicant = ApplicantProfile(
            gpa=dto.gpa,
            sat_score=dto.sat_score,
            ec_count=dto.ec_count,
            leadership_roles=dto.leadership_roles,
            essay_quality=dto.essay_quality,
            recommendations=dto.recommendations,
        )
        estimate = estimate_acceptance(applicant, dto.target_school)
        payload = AcceptanceResponseDTO(
            school=estimate.school,
            rate=estimate.rate,
            breakdown=estimate.breakdown(),
        )
        return jsonify(payload.model_dump()), 200

    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("admissions", __name__, url_prefix="/api")
        bp.add_url_rule("/calculate-acceptance", view_func=self.calculate, methods=["POST"])
        return bp
