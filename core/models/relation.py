# ============================================================================
# RELATION MODEL
# ============================================================================
# STATUS: Core model - Derived inter-entity associations
# PURPOSE: belongsTo / hasOne / hasMany edges inferred by the extractor
# CREATED: 14 OCT 2026
# EXPORTS: Relation
# DEPENDENCIES: pydantic
# ============================================================================
"""
Relation Model

Relations are never declared directly. A reference field on A pointing
at B yields belongsTo(A -> B); a @derivedFrom back-reference on B naming
that field yields hasOne(B -> A) or hasMany(B -> A).

In every case foreign_key names the attribute holding the key on the
table of the referencing entity (the belongsTo owner).
"""

from pydantic import BaseModel, Field

from core.contracts import RelationKind


class Relation(BaseModel):
    """An inferred association between two entities."""
    from_entity: str
    to_entity: str
    kind: RelationKind
    foreign_key: str = Field(..., description="Key attribute, e.g. authorId")
    field_name: str = Field(..., description="Field on from_entity exposing the relation")

    model_config = {"frozen": True}

    @property
    def key_owner(self) -> str:
        """Entity whose table holds the foreign key column."""
        if self.kind == RelationKind.BELONGS_TO:
            return self.from_entity
        return self.to_entity

    @property
    def key_target(self) -> str:
        """Entity whose primary key the foreign key references."""
        if self.kind == RelationKind.BELONGS_TO:
            return self.to_entity
        return self.from_entity

    def describe(self) -> str:
        return f"{self.kind.value}({self.from_entity}->{self.to_entity}, {self.foreign_key})"


__all__ = ["Relation"]
