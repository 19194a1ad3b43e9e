# ============================================================================
# SCHEMA MODEL
# ============================================================================
# STATUS: Core model - Extractor output / artifact generator input
# PURPOSE: Self-contained normalized model for one schema
# CREATED: 14 OCT 2026
# EXPORTS: SchemaModel
# DEPENDENCIES: pydantic
# ============================================================================
"""
Schema Model

Produced fresh by every extraction pass. Holds no references back into
the parsed document; the live database is the only durable state.
"""

from typing import Dict, List, Optional
from pydantic import BaseModel, Field

from core.models.entity import Entity
from core.models.enumeration import Enumeration, JsonShape
from core.models.relation import Relation


class SchemaModel(BaseModel):
    """Entities, enumerations, JSON shapes, and relations of one schema."""
    entities: List[Entity] = Field(default_factory=list)
    enums: List[Enumeration] = Field(default_factory=list)
    json_shapes: List[JsonShape] = Field(default_factory=list)
    relations: List[Relation] = Field(default_factory=list)

    model_config = {"frozen": True}

    def entity(self, name: str) -> Optional[Entity]:
        for entity in self.entities:
            if entity.name == name:
                return entity
        return None

    def enum_map(self) -> Dict[str, Enumeration]:
        return {e.name: e for e in self.enums}

    def shape_map(self) -> Dict[str, JsonShape]:
        return {s.name: s for s in self.json_shapes}

    def relations_from(self, entity_name: str) -> List[Relation]:
        return [r for r in self.relations if r.from_entity == entity_name]


__all__ = ["SchemaModel"]
