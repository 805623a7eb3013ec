from typing import Any, Dict, Iterable, Iterator, List, Optional

import orjson
from pydantic import TypeAdapter, ValidationError

from governance.models.dao import DaoRecord
from utils.exceptions import DaoNotFoundError, RegistryConfigError
from utils.logger_utils import get_logger

logger = get_logger("DAO Registry")

_DAO_LIST_ADAPTER = TypeAdapter(List[DaoRecord])


def _key(value: str) -> str:
    return value.strip().casefold()


class DaoRegistry(object):
    """
    Read-only table of the configured DAOs, in configuration order.
    Names and slugs are unique and matched case-insensitively.
    """

    def __init__(self, records: Iterable[DaoRecord]):
        self._records: List[DaoRecord] = list(records)
        self._by_name: Dict[str, DaoRecord] = {}
        self._by_slug: Dict[str, DaoRecord] = {}

        for record in self._records:
            name_key = _key(record.name)
            if name_key in self._by_name:
                raise RegistryConfigError(f"Duplicate DAO name '{record.name}'")
            self._by_name[name_key] = record

            if record.slug:
                slug_key = _key(record.slug)
                if slug_key in self._by_slug:
                    raise RegistryConfigError(f"Duplicate DAO slug '{record.slug}'")
                self._by_slug[slug_key] = record

    @classmethod
    def from_dicts(cls, entries: Any) -> "DaoRegistry":
        """Accepts either a bare list of DAO entries or a {"daos": [...]} document."""
        if isinstance(entries, dict):
            entries = entries.get("daos")
        if not isinstance(entries, list):
            raise RegistryConfigError("DAO registry must be a list of entries or an object with a 'daos' list")
        try:
            records = _DAO_LIST_ADAPTER.validate_python(entries)
        except ValidationError as e:
            raise RegistryConfigError(f"Invalid DAO registry entry: {e}") from e
        return cls(records)

    @classmethod
    def from_file(cls, path: str) -> "DaoRegistry":
        try:
            with open(path, "rb") as f:
                document = orjson.loads(f.read())
        except OSError as e:
            raise RegistryConfigError(f"Could not read DAO registry '{path}': {e}") from e
        except orjson.JSONDecodeError as e:
            raise RegistryConfigError(f"DAO registry '{path}' is not valid JSON: {e}") from e

        registry = cls.from_dicts(document)
        logger.info(f"Loaded {len(registry)} DAOs from {path}")
        return registry

    def get(self, name: str) -> DaoRecord:
        record = self.find(name)
        if record is None:
            raise DaoNotFoundError(name)
        return record

    def find(self, name: str) -> Optional[DaoRecord]:
        if not isinstance(name, str):
            return None
        return self._by_name.get(_key(name))

    def get_by_slug(self, slug: str) -> DaoRecord:
        record = self._by_slug.get(_key(slug)) if isinstance(slug, str) else None
        if record is None:
            raise DaoNotFoundError(slug)
        return record

    def list_featured(self) -> List[DaoRecord]:
        return [record for record in self._records if record.featured]

    def __iter__(self) -> Iterator[DaoRecord]:
        return iter(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.find(name) is not None
