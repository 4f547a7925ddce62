"""CVE reference links grouped by category."""

from __future__ import annotations

from survey_tracker.core.exceptions import NotFoundError, ValidationError
from survey_tracker.models import CVECategory, CVESystem
from survey_tracker.services.base_service import BaseService
from survey_tracker.utils.validators import internal_name, require_text, sanitize_text, validate_http_url


class CVEService(BaseService):
    def list_categories(self) -> list[CVECategory]:
        return self.db.query(CVECategory).order_by(CVECategory.display_name.asc()).all()

    def get_category(self, category_id: int) -> CVECategory:
        category = self.db.get(CVECategory, category_id)
        if category is None:
            raise NotFoundError(f"CVE category not found: {category_id}")
        return category

    def create_category(self, display_name: str, name: str | None = None, description: str | None = None) -> CVECategory:
        display_name = require_text(display_name, field="display_name", max_len=255)
        name = internal_name(name or display_name)
        if self.db.query(CVECategory).filter(CVECategory.name == name).first() is not None:
            raise ValidationError(f"Category already exists: {name}", field="name")
        category = CVECategory(name=name, display_name=display_name, description=sanitize_text(description) or None)
        self.db.add(category)
        self.commit()
        return category

    def delete_category(self, category_id: int) -> None:
        self.db.delete(self.get_category(category_id))
        self.commit()

    def list_systems(self, category_id: int | None = None) -> list[CVESystem]:
        query = self.db.query(CVESystem)
        if category_id is not None:
            query = query.filter(CVESystem.category_id == category_id)
        return query.order_by(CVESystem.name.asc()).all()

    def get_system(self, system_id: int) -> CVESystem:
        system = self.db.get(CVESystem, system_id)
        if system is None:
            raise NotFoundError(f"CVE system not found: {system_id}")
        return system

    def create_system(self, name: str, url: str, category_id: int) -> CVESystem:
        system = CVESystem(
            name=require_text(name, field="name", max_len=255),
            url=validate_http_url(url),
            category_id=self.get_category(category_id).id,
        )
        self.db.add(system)
        self.commit()
        return system

    def update_system(
        self,
        system_id: int,
        name: str | None = None,
        url: str | None = None,
        category_id: int | None = None,
    ) -> CVESystem:
        system = self.get_system(system_id)
        if name is not None:
            system.name = require_text(name, field="name", max_len=255)
        if url is not None:
            system.url = validate_http_url(url)
        if category_id is not None:
            system.category_id = self.get_category(category_id).id
        self.commit()
        return system

    def delete_system(self, system_id: int) -> None:
        self.db.delete(self.get_system(system_id))
        self.commit()
