import logging

import jwt
from dishka import from_context, provide
from fastapi.security.utils import get_authorization_scheme_param
from starlette.requests import Request

from kdeploy.config import Config
from kdeploy.domain.auth.model.identity import Anonymous, Identity, Principal
from kdeploy.domain.auth.model.value import UserId
from kdeploy.domain.auth.service.token import TokenService
from kdeploy.domain.shared.error import AuthorizationError
from kdeploy.util.di.base import Provider, Scope

logger = logging.getLogger(__name__)


class AuthProvider(Provider):
    request = from_context(provides=Request, scope=Scope.UOW)

    @provide(scope=Scope.APP)
    def get_token_service(self, config: Config) -> TokenService:
        return TokenService(_config=config.auth.jwt)

    @provide(scope=Scope.UOW)
    def get_identity(self, request: Request, token_service: TokenService) -> Identity:
        """Identify the requester by its bearer token.

        A missing, malformed, expired or badly signed token is not an error at
        this point, it just makes the request anonymous.
        """
        scheme, token = get_authorization_scheme_param(request.headers.get("Authorization"))
        if scheme.lower() != "bearer" or not token:
            return Anonymous()

        try:
            claims = token_service.validate_access_token(token)
        except jwt.InvalidTokenError as e:
            logger.debug("Rejected access token: %s", e)
            return Anonymous()

        subject = claims.get("sub")
        if not subject:
            logger.debug("Access token without subject")
            return Anonymous()
        return Principal(user_id=UserId(subject))

    @provide(scope=Scope.UOW)
    def get_principal(self, identity: Identity) -> Principal:
        if not isinstance(identity, Principal):
            raise AuthorizationError("Authentication required", code="missing_token")
        return identity
