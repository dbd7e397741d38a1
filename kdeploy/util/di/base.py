"""Dishka building blocks shared by every provider.

Two scopes, nested APP -> UOW. APP lives as long as the process and holds the
config, the cluster API client and the database engine. UOW is one HTTP
request: its database session and the handlers serving it.
"""

from dishka import BaseScope, new_scope
from dishka import Provider as DishkaProvider


class Scope(BaseScope):  # type: ignore[misc]  # BaseScope is designed to be subclassed
    APP = new_scope("APP")
    UOW = new_scope("UOW")


class Provider(DishkaProvider):
    """Base for all kdeploy DI providers."""
