from sqlalchemy.orm import Session
from roomierules.models.house_rule import HouseRule


class HouseRuleRepository:
    """Repository for HouseRule model operations"""

    def __init__(self, db: Session):
        self.db = db

    def get_by_house(self, house_id: int) -> list[HouseRule]:
        """Get all rules of a house, newest first"""
        return (
            self.db.query(HouseRule)
            .filter(HouseRule.house_id == house_id)
            .order_by(HouseRule.created_at.desc(), HouseRule.id.desc())
            .all()
        )

    def get_by_id(self, rule_id: int) -> HouseRule | None:
        return self.db.query(HouseRule).filter(HouseRule.id == rule_id).first()

    def create(self, rule: HouseRule) -> HouseRule:
        self.db.add(rule)
        self.db.commit()
        self.db.refresh(rule)
        return rule

    def update(self, rule: HouseRule) -> HouseRule:
        self.db.commit()
        self.db.refresh(rule)
        return rule

    def delete(self, rule: HouseRule) -> None:
        self.db.delete(rule)
        self.db.commit()
