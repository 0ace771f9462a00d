"""JSON-file store for named scenario presets."""
from __future__ import annotations

import json
import logging
import os
import uuid
from datetime import datetime, timezone
from typing import Dict, List, Optional

from pydantic import ValidationError

from core.models import LoanTemplate, ScenarioInput

logger = logging.getLogger(__name__)

TEMPLATES_FILE = "templates.json"


class TemplateStoreError(RuntimeError):
    """The backing file could not be read or does not hold templates."""


class TemplateNotFoundError(KeyError):
    pass


def template_to_scenario(template: LoanTemplate, name: Optional[str] = None) -> ScenarioInput:
    """Rebuild a scenario from a saved preset.

    Optional fields the preset never stored stay unset; ``lock_rate`` falls
    back to ``False``.
    """
    data = template.model_dump(exclude={"id", "title", "created_at", "updated_at"})
    data["lock_rate"] = bool(data.get("lock_rate") or False)
    data["name"] = name if name is not None else template.title
    return ScenarioInput(**data)


class TemplateStore:
    """Create, list and delete presets keyed by an opaque string id.

    The whole store is rewritten on every change; it is meant for a single
    officer's handful of presets, not for concurrent writers.
    """

    def __init__(self, path: Optional[str] = None) -> None:
        self.path = path or TEMPLATES_FILE

    def _load(self) -> Dict[str, dict]:
        if not os.path.exists(self.path):
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as exc:
            logger.error("Could not read templates from %s: %s", self.path, exc)
            raise TemplateStoreError(f"Could not read templates from {self.path}") from exc
        if not isinstance(data, dict):
            raise TemplateStoreError(f"{self.path} does not contain a template mapping")
        return data

    def _save(self, data: Dict[str, dict]) -> None:
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)

    def list(self) -> List[LoanTemplate]:
        """All presets, most recently updated first."""
        templates = []
        for key, raw in self._load().items():
            try:
                templates.append(LoanTemplate.model_validate(raw))
            except ValidationError:
                logger.warning("Skipping malformed template %s in %s", key, self.path)
        return sorted(templates, key=lambda t: t.updated_at, reverse=True)

    def get(self, template_id: str) -> LoanTemplate:
        raw = self._load().get(template_id)
        if raw is None:
            raise TemplateNotFoundError(template_id)
        return LoanTemplate.model_validate(raw)

    def create(self, title: str, scenario: ScenarioInput) -> LoanTemplate:
        now = datetime.now(timezone.utc)
        fields = scenario.model_dump(exclude={"name"})
        template = LoanTemplate(
            id=uuid.uuid4().hex,
            title=title.strip(),
            created_at=now,
            updated_at=now,
            **fields,
        )
        data = self._load()
        data[template.id] = template.model_dump(mode="json", by_alias=True)
        self._save(data)
        logger.info("Saved template %s (%s)", template.id, template.title)
        return template

    def delete(self, template_id: str) -> None:
        data = self._load()
        if template_id not in data:
            raise TemplateNotFoundError(template_id)
        del data[template_id]
        self._save(data)
        logger.info("Deleted template %s", template_id)
