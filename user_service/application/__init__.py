# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .services.password_hashing import WerkzeugPasswordHasher
from .services.tokens import JwtTokenService
from .use_cases.users.change_password import ChangePasswordUseCase
from .use_cases.users.delete_account import DeleteAccountUseCase
from .use_cases.users.get_profile import GetProfileUseCase
from .use_cases.users.login_user import LoginUserUseCase
from .use_cases.users.refresh_token import RefreshTokenUseCase
from .use_cases.users.register_user import RegisterUserInput, RegisterUserUseCase
from .use_cases.users.update_profile import UpdateProfileUseCase

__all__ = [
    "ChangePasswordUseCase",
    "DeleteAccountUseCase",
    "GetProfileUseCase",
    "JwtTokenService",
    "LoginUserUseCase",
    "RefreshTokenUseCase",
    "RegisterUserInput",
    "RegisterUserUseCase",
    "UpdateProfileUseCase",
    "WerkzeugPasswordHasher",
]
