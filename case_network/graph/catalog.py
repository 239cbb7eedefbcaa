"""Fixed catalog of documented rights violations linked into the case graph."""

from dataclasses import dataclass, field

from case_network.graph.entities import coerce_enum
from case_network.graph.models import RiskLevel


@dataclass(frozen=True)
class Violation:
    """A catalogued violation and the entities it implicates."""

    id: str                 # "<framework>-<article>", e.g. "udhr-9"
    name: str
    article: str
    severity: RiskLevel
    related_entities: tuple[str, ...] = field(default_factory=tuple)

    @property
    def framework(self) -> str:
        return self.id.split("-")[0].upper()

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "article": self.article,
            "severity": self.severity.value,
            "related_entities": list(self.related_entities),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Violation":
        related = data.get("related_entities", data.get("relatedEntities")) or ()
        return cls(
            id=data["id"],
            name=data.get("name") or data["id"],
            article=data.get("article") or "",
            severity=coerce_enum(RiskLevel, data.get("severity"), RiskLevel.LOW),
            related_entities=tuple(related),
        )


DEFAULT_VIOLATIONS: tuple[Violation, ...] = (
    Violation("udhr-9", "UDHR Art.9 Violation", "Arbitrary Detention",
              RiskLevel.CRITICAL, ("danish-thanvi", "fia")),
    Violation("udhr-12", "UDHR Art.12 Violation", "Privacy Violation",
              RiskLevel.HIGH, ("danish-thanvi", "saqib-mumtaz")),
    Violation("iccpr-14", "ICCPR Art.14 Violation", "Fair Trial Rights",
              RiskLevel.CRITICAL, ("danish-thanvi", "suresh-kumar")),
    Violation("iccpr-17", "ICCPR Art.17 Violation", "Privacy Interference",
              RiskLevel.HIGH, ("danish-thanvi", "nadra", "bcg")),
    Violation("cat-15", "CAT Art.15 Violation", "Evidence from Torture",
              RiskLevel.CRITICAL, ("fia", "danish-thanvi")),
    Violation("peca-33", "PECA §33 Violation", "Electronic Evidence",
              RiskLevel.CRITICAL, ("fia", "arbab", "imran-saad")),
    Violation("crpc-103", "CrPC §103 Violation", "Search Witnesses",
              RiskLevel.HIGH, ("fia", "danish-thanvi")),
    Violation("crpc-342", "CrPC §342 Violation", "Accused Statement",
              RiskLevel.HIGH, ("danish-thanvi", "kashif-bhatti")),
)
