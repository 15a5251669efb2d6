# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from typing import TypeVar

from flask import Blueprint, Response, jsonify, request
from pydantic import BaseModel, ValidationError

from user_service.application.use_cases.users.change_password import ChangePasswordUseCase
from user_service.application.use_cases.users.delete_account import DeleteAccountUseCase
from user_service.application.use_cases.users.get_profile import GetProfileUseCase
from user_service.application.use_cases.users.login_user import LoginUserUseCase
from user_service.application.use_cases.users.refresh_token import RefreshTokenUseCase
from user_service.application.use_cases.users.register_user import (
    RegisterUserInput,
    RegisterUserUseCase,
)
from user_service.application.use_cases.users.update_profile import UpdateProfileUseCase
from user_service.domain.users.exceptions import InvalidCredentialsError
from user_service.infrastructure.audit import AuditAction, audit_log
from user_service.interfaces.http.auth import (
    BearerAuthenticator,
    current_user_id,
    extract_bearer_token,
)
from user_service.interfaces.http.dto.users import (
    ChangePasswordRequestDTO,
    LoginRequestDTO,
    LoginResponseDTO,
    OkDTO,
    RegisterRequestDTO,
    TokenResponseDTO,
    UpdateProfileRequestDTO,
    UserResponseDTO,
)
from user_service.shared.config import RateLimitConfig
from user_service.shared.errors.validation import raise_validation_error
from user_service.shared.logging import logger
from user_service.shared.middleware.rate_limit import rate_limit

DTO = TypeVar("DTO", bound=BaseModel)


def _get_client_ip() -> str | None:
    ip_address = request.headers.get("X-Forwarded-For", request.remote_addr)
    if ip_address and "," in ip_address:
        ip_address = ip_address.split(",")[0].strip()
    return ip_address


def _parse_body(dto_type: type[DTO]) -> DTO:
    try:
        return dto_type.model_validate(request.get_json(silent=True) or {})
    except ValidationError as exc:
        raise_validation_error(exc)


class UsersController:
    def __init__(
        self,
        *,
        register_use_case: RegisterUserUseCase,
        login_use_case: LoginUserUseCase,
        get_profile_use_case: GetProfileUseCase,
        update_profile_use_case: UpdateProfileUseCase,
        refresh_token_use_case: RefreshTokenUseCase,
        change_password_use_case: ChangePasswordUseCase,
        delete_account_use_case: DeleteAccountUseCase,
        authenticator: BearerAuthenticator,
        rate_limit_config: RateLimitConfig | None = None,
    ) -> None:
        self._register_use_case = register_use_case
        self._login_use_case = login_use_case
        self._get_profile_use_case = get_profile_use_case
        self._update_profile_use_case = update_profile_use_case
        self._refresh_token_use_case = refresh_token_use_case
        self._change_password_use_case = change_password_use_case
        self._delete_account_use_case = delete_account_use_case
        self._authenticator = authenticator
        self._rate_limit_config = rate_limit_config or RateLimitConfig(enabled=False)

    def register(self) -> tuple[Response, int]:
        dto = _parse_body(RegisterRequestDTO)

        user = self._register_use_case.execute(
            RegisterUserInput(email=dto.email, password=dto.password, name=dto.name)
        )

        audit_log(AuditAction.REGISTER, user_id=user.id, ip_address=_get_client_ip())
        return jsonify(UserResponseDTO.from_entity(user).model_dump()), 201

    def login(self) -> tuple[Response, int]:
        dto = _parse_body(LoginRequestDTO)
        ip_address = _get_client_ip()

        try:
            user, token = self._login_use_case.execute(dto.email, dto.password)
        except InvalidCredentialsError:
            audit_log(AuditAction.LOGIN_FAILED, ip_address=ip_address, success=False)
            raise

        audit_log(AuditAction.LOGIN_SUCCESS, user_id=user.id, ip_address=ip_address)
        payload = LoginResponseDTO(
            token=token.token,
            expires_at=TokenResponseDTO.from_token(token).expires_at,
            user=UserResponseDTO.from_entity(user),
        )
        return jsonify(payload.model_dump()), 200

    def get_profile(self) -> tuple[Response, int]:
        user = self._get_profile_use_case.execute(current_user_id())
        return jsonify(UserResponseDTO.from_entity(user).model_dump()), 200

    def update_profile(self) -> tuple[Response, int]:
        dto = _parse_body(UpdateProfileRequestDTO)
        user_id = current_user_id()

        user = self._update_profile_use_case.execute(user_id, dto.name)

        audit_log(AuditAction.PROFILE_UPDATED, user_id=user_id, ip_address=_get_client_ip())
        return jsonify(UserResponseDTO.from_entity(user).model_dump()), 200

    def refresh_token(self) -> tuple[Response, int]:
        # Not behind ``required``: a token inside the grace window may still be refreshed.
        token = self._refresh_token_use_case.execute(extract_bearer_token())

        audit_log(
            AuditAction.TOKEN_REFRESHED,
            user_id=token.claims.user_id,
            ip_address=_get_client_ip(),
        )
        return jsonify(TokenResponseDTO.from_token(token).model_dump()), 200

    def change_password(self) -> tuple[Response, int]:
        dto = _parse_body(ChangePasswordRequestDTO)
        user_id = current_user_id()

        try:
            self._change_password_use_case.execute(user_id, dto.current_password, dto.new_password)
        except InvalidCredentialsError:
            audit_log(
                AuditAction.PASSWORD_CHANGED,
                user_id=user_id,
                ip_address=_get_client_ip(),
                success=False,
            )
            raise

        audit_log(AuditAction.PASSWORD_CHANGED, user_id=user_id, ip_address=_get_client_ip())
        return jsonify(OkDTO().model_dump()), 200

    def delete_account(self) -> tuple[str, int]:
        user_id = current_user_id()

        self._delete_account_use_case.execute(user_id)

        audit_log(AuditAction.ACCOUNT_DELETED, user_id=user_id, ip_address=_get_client_ip())
        logger.info(f"users.delete_account: responded user_id={user_id}")
        return "", 204

    def as_blueprint(self) -> Blueprint:
        limited = rate_limit(self._rate_limit_config)
        authed = self._authenticator.required

        bp = Blueprint("users", __name__, url_prefix="/api/v1/users")
        bp.add_url_rule("/register", view_func=limited(self.register), methods=["POST"])
        bp.add_url_rule("/login", view_func=limited(self.login), methods=["POST"])
        bp.add_url_rule("/profile", view_func=authed(self.get_profile), methods=["GET"])
        bp.add_url_rule("/profile", view_func=authed(self.update_profile), methods=["PUT"])
        bp.add_url_rule("/profile", view_func=authed(self.delete_account), methods=["DELETE"])
        bp.add_url_rule("/refresh-token", view_func=self.refresh_token, methods=["POST"])
        bp.add_url_rule("/password", view_func=authed(self.change_password), methods=["PUT"])
        return bp
