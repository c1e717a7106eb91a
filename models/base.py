"""Gemeinsame Basisklasse für alle Profil-Modelle (Pydantic v2)."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Python-Attribute in snake_case, JSON-Schlüssel in camelCase.

    Die Profildateien werden im camelCase-Format gespeichert
    (``shortName``, ``timeGroups``, ``enableConfig``, ...).
    Beim Laden werden beide Schreibweisen akzeptiert.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_json(self, indent: int = 2) -> str:
        """Serialisiert das Modell im Dateiformat (camelCase, ISO-8601)."""
        return self.model_dump_json(by_alias=True, indent=indent)
