"""House context for request authorization."""

from dataclasses import dataclass
from roomierules.models.user import User
from roomierules.models.house import House


@dataclass
class HouseContext:
    """
    The authenticated user together with the house they belong to.

    Built by the get_house_context dependency for every route that only
    makes sense inside a house (bills, rules, analytics, search).

    Attributes:
        user: The authenticated User object
        house: The House referenced by user.house_id
    """

    user: User
    house: House

    def owns_house(self) -> bool:
        """Check if the user is the host who owns this house."""
        return self.house.host_id == self.user.id

    def __repr__(self) -> str:
        return f"<HouseContext(user_id={self.user.id}, house_id={self.house.id})>"
