# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from datetime import timedelta
from functools import cached_property

from campusdesk.application.services.password_hashing import WerkzeugPasswordHasher
from campusdesk.application.services.session_manager import SessionManager
from campusdesk.application.use_cases.users.login_user import LoginUserUseCase
from campusdesk.application.use_cases.users.logout_user import LogoutUserUseCase
from campusdesk.application.use_cases.users.register_user import RegisterUserUseCase
from campusdesk.infrastructure.db import SessionLocal
from campusdesk.infrastructure.repositories.users.sqlalchemy_user_repository import (
    SqlAlchemySessionRepository, SqlAlchemyUserRepository)
from campusdesk.interfaces.http.controllers.admissions_controller import \
    AdmissionsController
from campusdesk.interfaces.http.controllers.auth_controller import AuthController
from campusdesk.interfaces.http.controllers.misc_controller import MiscController
from campusdesk.shared.config import load_config


class Container:
    @cached_property
    def password_hasher(self) -> WerkzeugPasswordHasher:
        return WerkzeugPasswordHasher()

    @cached_property
    def user_repository(self) -> SqlAlchemyUserRepository:
        return SqlAlchemyUserRepository(SessionLocal)

    @cached_property
    def session_repository(self) -> SqlAlchemySessionRepository:
        return SqlAlchemySessionRepository(SessionLocal)

    @cached_property
    def session_manager(self) -> SessionManager:
        return SessionManager(
            sessions=self.session_repository,
            users=self.user_repository,
            ttl=timedelta(seconds=load_config().session.ttl_seconds),
        )

    @cached_property
    def register_user_use_case(self) -> RegisterUserUseCase:
        return RegisterUserUseCase(
            users=self.user_repository,
            sessions=self.session_manager,
            password_hasher=self.password_hasher,
        )

    @cached_property
    def login_user_use_case(self) -> LoginUserUseCase:
        return LoginUserUseCase(
            users=self.user_repository,
            sessions=self.session_manager,
            password_hasher=self.password_hasher,
        )

    @cached_property
    def logout_user_use_case(self) -> LogoutUserUseCase:
        return LogoutUserUseCase(sessions=self.session_manager)

    @cached_property
    def auth_controller(self) -> AuthController:
        return AuthController(
            register_use_case=self.register_user_use_case,
            login_use_case=self.login_user_use_case,
            logout_use_case=self.logout_user_use_case,
        )

    @cached_property
    def admissions_controller(self) -> AdmissionsController:
        return AdmissionsController()

    @cached_property
    def misc_controller(self) -> MiscController:
        return MiscController()


container = Container()
