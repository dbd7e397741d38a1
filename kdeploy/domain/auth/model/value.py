"""Value objects for the auth domain."""

from kdeploy.domain.shared.model.value import RootValueObject


class UserId(RootValueObject[str]):
    """Opaque identifier of a user, taken from the token subject."""

    def __hash__(self) -> int:
        return hash(self.root)
