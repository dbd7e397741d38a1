from dataclasses import dataclass
from typing import Any, dataclass_transform


@dataclass_transform(kw_only_default=True)
class Service:
    """Base for domain services.

    Subclasses become keyword-only dataclasses: collaborators are declared as
    fields and passed by name, whether by a DI provider or by a test.
    """

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        dataclass(kw_only=True)(cls)
