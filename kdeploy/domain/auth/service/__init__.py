from kdeploy.domain.auth.service.token import TokenService

__all__ = ["TokenService"]
