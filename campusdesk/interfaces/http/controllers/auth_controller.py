# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from typing import cast

from flask import Blueprint, Response, jsonify, request
from pydantic import ValidationError

from campusdesk.application.use_cases.users.login_user import LoginUserUseCase
from campusdesk.application.use_cases.users.logout_user import LogoutUserUseCase
from campusdesk.application.use_cases.users.register_user import RegisterUserUseCase
from campusdesk.domain.users.entities import User
from campusdesk.domain.users.exceptions import InvalidCredentialsError
from campusdesk.infrastructure.audit import AuditAction, audit_log
from campusdesk.interfaces.http.dto.auth import (AuthSuccessDTO, LoginRequestDTO,
                                                 PublicUserDTO, SignupRequestDTO)
from campusdesk.shared.errors.base import PersistenceError
from campusdesk.shared.errors.validation import raise_validation_error
from campusdesk.shared.logging import logger
from campusdesk.shared.middleware.rate_limit import rate_limit
from campusdesk.shared.middleware.session_auth import (auth_required,
                                                       clear_session_cookie,
                                                       current_user,
                                                       read_session_token,
                                                       set_session_cookie)


def _get_client_ip() -> str | None:
    ip_address = request.headers.get("X-Forwarded-For", request.remote_addr)
    if ip_address and "," in ip_address:
        ip_address = ip_address.split(",")[0].strip()
    return ip_address


def _public_user(user: User) -> dict[str, object]:
    dto = PublicUserDTO(id=user.id, email=user.email, full_name=user.full_name)
    return dto.model_dump(by_alias=True)


class AuthController:
    def __init__(
        self,
        *,
        register_use_case: RegisterUserUseCase,
        login_use_case: LoginUserUseCase,
        logout_use_case: LogoutUserUseCase,
    ) -> None:
        self._register_use_case = register_use_case
        self._login_use_case = login_use_case
        self._logout_use_case = logout_use_case

    @rate_limit(limit=5, window_seconds=60.0)
    def signup(self) -> tuple[Response, int]:
        try:
            dto = SignupRequestDTO.model_validate(request.get_json(silent=True) or {})
        except ValidationError as exc:
            raise_validation_error(exc)

        user, issued = self._register_use_case.execute(dto.email, dto.password, dto.full_name)

        audit_log(
            AuditAction.SIGNUP,
            user_id=user.id,
            email=user.email,
            user_name=user.full_name,
            ip_address=_get_client_ip(),
        )

        response = jsonify(_public_user(user))
        set_session_cookie(response, issued.token)
        logger.info(f"auth.signup: ok user_id={user.id}")
        return response, 200

    @rate_limit(limit=10, window_seconds=60.0)
    def login(self) -> tuple[Response, int]:
        try:
            dto = LoginRequestDTO.model_validate(request.get_json(silent=True) or {})
        except ValidationError as exc:
            raise_validation_error(exc)

        ip_address = _get_client_ip()

        try:
            user, issued = self._login_use_case.execute(dto.email, dto.password)
        except InvalidCredentialsError as exc:
            audit_log(
                AuditAction.LOGIN_FAILED,
                email=dto.email,
                ip_address=ip_address,
                details={"reason": exc.reason},
                success=False,
            )
            raise

        audit_log(
            AuditAction.LOGIN,
            user_id=user.id,
            email=user.email,
            ip_address=ip_address,
        )

        response = jsonify(_public_user(user))
        set_session_cookie(response, issued.token)
        logger.info(f"auth.login: ok user_id={user.id}")
        return response, 200

    def logout(self) -> tuple[Response, int]:
        user = current_user()
        try:
            self._logout_use_case.execute(read_session_token())
        except PersistenceError:
            logger.exception("auth.logout: session revoke failed, clearing cookie anyway")

        audit_log(
            AuditAction.LOGOUT,
            user_id=user.id if user else None,
            ip_address=_get_client_ip(),
        )

        response = jsonify(AuthSuccessDTO().model_dump())
        clear_session_cookie(response)
        logger.info("auth.logout: ok")
        return response, 200

    @auth_required
    def user(self) -> tuple[Response, int]:
        user = cast(User, current_user())
        return jsonify(_public_user(user)), 200

    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("auth", __name__, url_prefix="/api/auth")
        bp.add_url_rule("/signup", view_func=self.signup, methods=["POST"])
        bp.add_url_rule("/login", view_func=self.login, methods=["POST"])
        bp.add_url_rule("/logout", view_func=self.logout, methods=["POST"])
        bp.add_url_rule("/user", view_func=self.user, methods=["GET"])
        return bp
