"""Findings categories and templates, including drag-and-drop ordering."""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy import or_

from survey_tracker.core.exceptions import NotFoundError, ValidationError
from survey_tracker.core.logging import LogContext, build_log_event
from survey_tracker.domain.enums import RiskLevel
from survey_tracker.domain.ordering import ReorderResult, next_order_index, reorder
from survey_tracker.domain.records import RequestingUser
from survey_tracker.domain.risk import tech_risk_level
from survey_tracker.models import FindingCategory, FindingTemplate
from survey_tracker.services.base_service import BaseService
from survey_tracker.utils.validators import internal_name, require_text, sanitize_text

logger = logging.getLogger(__name__)

_TEXT_FIELDS = ("subject", "test_description", "test_findings", "exposure_description")


def _parse_level(value: Any, field: str) -> RiskLevel:
    try:
        return RiskLevel(str(value).strip().lower())
    except ValueError as exc:
        raise ValidationError(f"Unknown risk level: {value}", field=field) from exc


class FindingService(BaseService):
    def list_categories(self) -> list[FindingCategory]:
        return self.db.query(FindingCategory).order_by(FindingCategory.order_index.asc(), FindingCategory.id.asc()).all()

    def get_category(self, category_id: int) -> FindingCategory:
        category = self.db.get(FindingCategory, category_id)
        if category is None:
            raise NotFoundError(f"Findings category not found: {category_id}")
        return category

    def create_category(
        self,
        display_name: str,
        name: str | None = None,
        description: str | None = None,
    ) -> FindingCategory:
        display_name = require_text(display_name, field="display_name", max_len=255)
        name = internal_name(name or display_name)
        if self.db.query(FindingCategory).filter(FindingCategory.name == name).first() is not None:
            raise ValidationError(f"Category already exists: {name}", field="name")
        category = FindingCategory(
            name=name,
            display_name=display_name,
            description=sanitize_text(description) or None,
            order_index=next_order_index(self.list_categories()),
        )
        self.db.add(category)
        self.commit()
        return category

    def update_category(
        self,
        category_id: int,
        display_name: str | None = None,
        description: str | None = None,
    ) -> FindingCategory:
        category = self.get_category(category_id)
        if display_name is not None:
            category.display_name = require_text(display_name, field="display_name", max_len=255)
        if description is not None:
            category.description = sanitize_text(description) or None
        self.commit()
        return category

    def delete_category(self, category_id: int) -> None:
        self.db.delete(self.get_category(category_id))
        self.commit()

    def _persist_order(self, items: list[Any], result: ReorderResult) -> None:
        """All changed indices are written in one transaction."""
        by_id = {item.id: item for item in items}
        for item_id, index in result.changed.items():
            by_id[item_id].order_index = index
        self.commit()

    def reorder_categories(self, viewer: RequestingUser, moved_id: int, target_index: int) -> ReorderResult:
        categories = self.list_categories()
        result = reorder(categories, moved_id, target_index)
        self._persist_order(categories, result)
        logger.info(
            "findings.categories_reordered",
            extra=build_log_event(
                "findings.categories_reordered",
                LogContext(user_id=viewer.user_id),
                moved_id=moved_id,
                changed=len(result.changed),
            ),
        )
        return result

    def list_templates(self, category_id: int | None = None, search: str | None = None) -> list[FindingTemplate]:
        query = self.db.query(FindingTemplate)
        if category_id is not None:
            query = query.filter(FindingTemplate.category_id == category_id)
        term = sanitize_text(search)
        if term:
            pattern = f"%{term}%"
            query = query.filter(
                or_(FindingTemplate.subject.ilike(pattern), FindingTemplate.test_description.ilike(pattern))
            )
        return query.order_by(FindingTemplate.order_index.asc(), FindingTemplate.id.asc()).all()

    def get_template(self, template_id: int) -> FindingTemplate:
        template = self.db.get(FindingTemplate, template_id)
        if template is None:
            raise NotFoundError(f"Findings template not found: {template_id}")
        return template

    def create_template(self, viewer: RequestingUser, data: dict[str, Any]) -> FindingTemplate:
        category = self.get_category(data["category_id"])
        severity = _parse_level(data.get("severity", RiskLevel.MEDIUM.value), "severity")
        damage = _parse_level(data.get("damage_potential", RiskLevel.MEDIUM.value), "damage_potential")
        template = FindingTemplate(
            category_id=category.id,
            severity=severity,
            damage_potential=damage,
            tech_risk_level=tech_risk_level(severity, damage),
            recommendations=sanitize_text(data.get("recommendations")),
            order_index=next_order_index(self.list_templates(category_id=category.id)),
            created_by=viewer.user_id,
            **{name: require_text(data.get(name), field=name) for name in _TEXT_FIELDS},
        )
        self.db.add(template)
        self.commit()
        return template

    def update_template(self, template_id: int, data: dict[str, Any]) -> FindingTemplate:
        template = self.get_template(template_id)
        if data.get("category_id") is not None:
            template.category_id = self.get_category(data["category_id"]).id
        for name in _TEXT_FIELDS:
            if data.get(name) is not None:
                setattr(template, name, require_text(data[name], field=name))
        if data.get("recommendations") is not None:
            template.recommendations = sanitize_text(data["recommendations"])
        if data.get("severity") is not None:
            template.severity = _parse_level(data["severity"], "severity")
        if data.get("damage_potential") is not None:
            template.damage_potential = _parse_level(data["damage_potential"], "damage_potential")
        template.tech_risk_level = tech_risk_level(template.severity, template.damage_potential)
        self.commit()
        return template

    def delete_template(self, template_id: int) -> None:
        self.db.delete(self.get_template(template_id))
        self.commit()

    def reorder_templates(self, category_id: int, moved_id: int, target_index: int) -> ReorderResult:
        templates = self.list_templates(category_id=self.get_category(category_id).id)
        result = reorder(templates, moved_id, target_index)
        self._persist_order(templates, result)
        return result
