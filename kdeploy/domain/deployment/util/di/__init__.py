from kdeploy.domain.deployment.util.di.provider import DeploymentProvider

__all__ = ["DeploymentProvider"]
