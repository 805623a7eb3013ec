from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from governance.models.dao import DaoRecord
from utils.exceptions import DaoReaderError


class LoadStatus(str, Enum):
    LOADING = "LOADING"
    SUCCESS = "SUCCESS"
    ERROR = "ERROR"


class LoadResult(BaseModel):
    """Loading / success / error state of one read, as a consumer renders it."""

    model_config = ConfigDict(use_enum_values=True)

    status: LoadStatus = LoadStatus.LOADING
    data: Any = None
    error: Optional[str] = None
    error_kind: Optional[str] = None

    @classmethod
    def loading(cls) -> "LoadResult":
        return cls(status=LoadStatus.LOADING)

    @classmethod
    def success(cls, data: Any) -> "LoadResult":
        return cls(status=LoadStatus.SUCCESS, data=data)

    @classmethod
    def failure(cls, error: DaoReaderError) -> "LoadResult":
        return cls(status=LoadStatus.ERROR, error=error.message, error_kind=error.kind)

    @property
    def is_success(self) -> bool:
        return self.status == LoadStatus.SUCCESS

    @property
    def is_error(self) -> bool:
        return self.status == LoadStatus.ERROR


class DaoDetailView(BaseModel):
    dao: DaoRecord
    membership: LoadResult = Field(default_factory=LoadResult.loading)
    proposals: LoadResult = Field(default_factory=LoadResult.loading)
