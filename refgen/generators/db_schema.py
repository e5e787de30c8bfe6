"""Database schema page: ER diagram, table summary, and foreign keys."""

from __future__ import annotations

from typing import Dict

from ..extractors import ForeignKeyExtractor, SchemaExtractor
from ..output import Document
from ..render import mermaid, tables
from ..sources import ResolvedSources
from .base import Generator


class DatabaseSchemaGenerator(Generator):
    name = "db-schema"
    output_filename = "database-schema.md"
    title = "Database Schema"
    origin = "SQL migration analysis"

    def required_files(self) -> Dict[str, str]:
        schema = self.config.schema
        return {"tables": schema.tables_file, "constraints": schema.constraints_file}

    def build(self, sources: ResolvedSources) -> tuple[Document, int]:
        schema = self.config.schema
        table_entities = SchemaExtractor(
            schema_name=schema.name, pk_generators=schema.pk_generators
        ).extract_file(sources.file("tables"))
        foreign_keys = ForeignKeyExtractor().extract_file(sources.file("constraints"))
        self.logger.info(
            "  Found %d tables and %d foreign keys", len(table_entities), len(foreign_keys)
        )

        intro = (
            f"The {self.config.project_name} database uses PostgreSQL with the "
            f"`{schema.name}` schema. Primary keys are UUID columns populated by a "
            "time-ordered generator."
        )
        document = self.new_document(f"{self.source_label} SQL migration analysis", intro)

        if not table_entities:
            source = self.relative_source(sources.file("tables"))
            document.add(f"No tables found in `{source}`.")
            return document, 0

        document.add(
            "## Entity Relationship Diagram",
            mermaid.er_diagram(table_entities, foreign_keys),
            "## Tables",
            tables.schema_tables(table_entities, schema.table_descriptions),
            "## Foreign Key Relationships",
        )
        if foreign_keys:
            document.add(tables.foreign_key_table(foreign_keys))
        else:
            document.add("No foreign keys found.")
        return document, len(table_entities)


__all__ = ["DatabaseSchemaGenerator"]
