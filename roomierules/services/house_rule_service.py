from sqlalchemy.orm import Session

from roomierules.models.house_context import HouseContext
from roomierules.models.house_rule import HouseRule
from roomierules.models.user import User
from roomierules.repositories.house_rule_repository import HouseRuleRepository
from roomierules.schemas.house_rule_schemas import HouseRuleCreate, HouseRuleUpdate
from roomierules.core.exceptions import NotFoundException, ForbiddenException


class HouseRuleService:
    """Rules board: members read, the host writes"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = HouseRuleRepository(db)

    def list_rules(self, context: HouseContext) -> list[HouseRule]:
        return self.repo.get_by_house(context.house.id)

    def create_rule(self, data: HouseRuleCreate, context: HouseContext) -> HouseRule:
        """Post a rule (host only)"""
        if not context.owns_house():
            raise ForbiddenException("Only house hosts can create rules")

        rule = HouseRule(
            house_id=context.house.id,
            title=data.title,
            description=data.description,
            created_by=context.user.id,
        )
        return self.repo.create(rule)

    def get_rule(self, rule_id: int, user: User) -> HouseRule:
        """
        Get a rule of the caller's house.

        Raises:
            NotFoundException: If rule not found
            ForbiddenException: If the rule belongs to another house
        """
        rule = self.repo.get_by_id(rule_id)
        if not rule:
            raise NotFoundException("House rule not found")
        if user.house_id != rule.house_id:
            raise ForbiddenException("Access denied")
        return rule

    def _get_for_host(self, rule_id: int, user: User, action: str) -> HouseRule:
        rule = self.repo.get_by_id(rule_id)
        if not rule:
            raise NotFoundException("House rule not found")
        if user.house_id != rule.house_id or rule.house.host_id != user.id:
            raise ForbiddenException(f"Only the house host can {action} rules")
        return rule

    def update_rule(self, rule_id: int, data: HouseRuleUpdate, user: User) -> HouseRule:
        rule = self._get_for_host(rule_id, user, "update")
        if data.title is not None:
            rule.title = data.title
        if data.description is not None:
            rule.description = data.description or None
        return self.repo.update(rule)

    def delete_rule(self, rule_id: int, user: User) -> None:
        rule = self._get_for_host(rule_id, user, "delete")
        self.repo.delete(rule)
