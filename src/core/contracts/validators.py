"""
JSON Schema Contract Validators

Валидация JSON данных на границах движка согласно формальным JSON Schema
контрактам. Использует библиотеку jsonschema (Draft 2020-12).

Схемы (src/core/contracts/schema/):
- value.json       — сериализованное Value (to_payload)
- frontmatter.json — объявления документа: global и exchange
"""

import json
from pathlib import Path
from typing import Any, Dict, Iterator

import jsonschema
from jsonschema import Draft202012Validator, ValidationError


# =============================================================================
# SCHEMA LOADER
# =============================================================================


class SchemaLoader:
    """
    Загрузчик JSON Schema файлов.

    Схемы лежат в каталоге schema/ рядом с этим модулем и поставляются
    вместе с пакетом.
    """

    def __init__(self, schema_dir: Path | None = None):
        self._schema_dir = schema_dir if schema_dir is not None else Path(__file__).parent / "schema"
        if not self._schema_dir.exists():
            raise RuntimeError(f"Schema directory not found: {self._schema_dir}")

        # Кэш загруженных схем
        self._schemas: Dict[str, Dict[str, Any]] = {}

    @property
    def schema_dir(self) -> Path:
        return self._schema_dir

    def load_schema(self, schema_name: str) -> Dict[str, Any]:
        """
        Загрузка JSON Schema файла.

        Args:
            schema_name: Имя схемы без расширения (например, 'value')

        Returns:
            Загруженная схема как dict

        Raises:
            FileNotFoundError: Если файл схемы не найден
            json.JSONDecodeError: Если файл не является валидным JSON
            ValueError: Если схема не проходит meta-validation
        """
        if schema_name in self._schemas:
            return self._schemas[schema_name]

        schema_path = self._schema_dir / f"{schema_name}.json"
        if not schema_path.exists():
            raise FileNotFoundError(f"Schema not found: {schema_path}")

        with open(schema_path, "r", encoding="utf-8") as f:
            schema = json.load(f)

        try:
            Draft202012Validator.check_schema(schema)
        except jsonschema.SchemaError as e:
            raise ValueError(f"Invalid JSON Schema in {schema_name}.json: {e}") from e

        self._schemas[schema_name] = schema
        return schema


_SCHEMA_LOADER = SchemaLoader()


# =============================================================================
# CONTRACT VALIDATORS
# =============================================================================


class ContractValidator:
    """
    Базовый класс для валидаторов контрактов.

    Инкапсулирует Draft202012Validator для одной схемы.
    """

    def __init__(self, schema_name: str, loader: SchemaLoader | None = None):
        self.schema_name = schema_name
        self.schema = (loader or _SCHEMA_LOADER).load_schema(schema_name)
        self.validator = Draft202012Validator(self.schema)

    def validate(self, data: Any) -> None:
        """
        Raises:
            ValidationError: Если данные не соответствуют схеме
        """
        self.validator.validate(data)

    def is_valid(self, data: Any) -> bool:
        """Проверка валидности данных без exception."""
        return self.validator.is_valid(data)

    def iter_errors(self, data: Any) -> Iterator[ValidationError]:
        """Итератор по всем ошибкам валидации."""
        return self.validator.iter_errors(data)


class ValuePayloadValidator(ContractValidator):
    """Валидатор сериализованного Value."""

    def __init__(self):
        super().__init__("value")


class FrontmatterValidator(ContractValidator):
    """Валидатор блока frontmatter ({"global": {...}, "exchange": {...}})."""

    def __init__(self):
        super().__init__("frontmatter")


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================


def validate_value_payload(data: Any) -> None:
    """
    Валидация payload значения.

    Raises:
        ValidationError: Если данные не соответствуют схеме value
    """
    ValuePayloadValidator().validate(data)


def validate_frontmatter(data: Any) -> None:
    """
    Валидация блока frontmatter.

    Raises:
        ValidationError: Если данные не соответствуют схеме frontmatter
    """
    FrontmatterValidator().validate(data)
