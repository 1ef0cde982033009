"""Schema registry: entity name to document model, table and field list."""

from dataclasses import dataclass, field

from golobe.config import Config
from golobe.errors import UnknownEntityError
from golobe.models import Account, Analytics, Booking, Document, User
from golobe.result import Failure, Result, Success

ID_FIELD = "id"


@dataclass(frozen=True)
class EntitySchema:
    name: str
    model: type[Document]
    table_name: str
    unique_fields: tuple[str, ...] = ()
    field_names: tuple[str, ...] = field(init=False)

    def __post_init__(self) -> None:
        # Stored attribute names, in declaration order.
        names = tuple(info.alias or name for name, info in self.model.model_fields.items())
        object.__setattr__(self, "field_names", names)

    @property
    def allowed_fields(self) -> tuple[str, ...]:
        return (*self.field_names, ID_FIELD)


def normalize_entity_name(entity_name: str) -> str:
    """Trim and capitalize: ``"  bOOking "`` -> ``"Booking"``."""
    return entity_name.strip().capitalize()


class SchemaRegistry:
    """In-process registry, populated once at startup and read-only afterwards."""

    def __init__(self, schemas: list[EntitySchema] | None = None) -> None:
        self._schemas: dict[str, EntitySchema] = {}
        for schema in schemas or []:
            self.register(schema)

    def register(self, schema: EntitySchema) -> None:
        name = normalize_entity_name(schema.name)
        if name in self._schemas:
            raise ValueError(f"Entity already registered: {name!r}")
        self._schemas[name] = schema

    def lookup(self, entity_name: str) -> Result[EntitySchema]:
        name = normalize_entity_name(entity_name)
        schema = self._schemas.get(name)
        if schema is None:
            return Failure(UnknownEntityError(f'"{name}" is not a valid entity'))
        return Success(schema)

    def names(self) -> list[str]:
        return list(self._schemas)


def build_registry(config: Config) -> SchemaRegistry:
    return SchemaRegistry(
        [
            EntitySchema("User", User, config.users_table, unique_fields=("email",)),
            EntitySchema("Account", Account, config.accounts_table),
            EntitySchema("Booking", Booking, config.bookings_table),
            EntitySchema("Analytics", Analytics, config.analytics_table),
        ]
    )
