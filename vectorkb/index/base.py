# Copyright 2025 ApeCloud, Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

from abc import ABC, abstractmethod
from enum import Enum
from typing import TYPE_CHECKING, Any, Dict

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, PositiveInt

if TYPE_CHECKING:
    from vectorkb.index.mapping import IndexCreationRequest

DEFAULT_TEXT_FIELD = "TEXT_CHUNK"
DEFAULT_METADATA_FIELD = "METADATA"


class IndexRef(BaseModel):
    """Identifies one external vector index; index_name is its primary key"""

    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="ignore")

    index_name: str = Field(min_length=1, alias="indexName")


class IndexSpec(IndexRef):
    """Properties of one external vector index"""

    # Provisioning frameworks pass every property as a string; lax mode coerces "1024" to 1024
    vector_dimension: PositiveInt = Field(
        validation_alias=AliasChoices("vectorDimension", "dimensions", "vector_dimension")
    )
    vector_field: str = Field(min_length=1, alias="vectorField")
    text_field: str = Field(min_length=1, alias="textField")
    metadata_field: str = Field(min_length=1, alias="metadataField")

    @classmethod
    def for_knowledge_base(cls, index_name: str, vector_dimension: int) -> "IndexSpec":
        """Field layout expected by a knowledge base backed by this index"""
        return cls(
            index_name=index_name,
            vector_dimension=vector_dimension,
            vector_field=index_name,
            text_field=DEFAULT_TEXT_FIELD,
            metadata_field=DEFAULT_METADATA_FIELD,
        )


class ReconcileOutcome(str, Enum):
    CREATED = "created"
    ALREADY_PRESENT = "already_present"
    DELETED = "deleted"
    FAILED = "failed"


class IndexResult:
    """Outcome of one fallible operation against the index store"""

    def __init__(
        self,
        success: bool,
        outcome: ReconcileOutcome,
        index_name: str,
        error: str = None,
        data: Dict[str, Any] = None,
    ):
        self.success = success
        self.outcome = outcome
        self.index_name = index_name
        self.error = error
        self.data = data or {}

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": self.success,
            "outcome": self.outcome.value,
            "index_name": self.index_name,
            "error": self.error,
            "data": self.data,
        }

    def __repr__(self):
        return f"IndexResult(success={self.success}, outcome={self.outcome.value}, index_name={self.index_name!r})"


class IndexStore(ABC):
    """External index-management API"""

    @abstractmethod
    def exists(self, name: str) -> bool:
        """
        Check whether an index is present in the store

        Args:
            name: Index name

        Returns:
            True if the index exists
        """
        pass

    @abstractmethod
    def create(self, name: str, request: "IndexCreationRequest") -> None:
        """
        Create an index with the given mapping

        Args:
            name: Index name
            request: Settings and field mapping for the new index
        """
        pass

    @abstractmethod
    def delete(self, name: str) -> None:
        """
        Delete an index

        Args:
            name: Index name

        Raises:
            IndexNotFound: if the index does not exist
        """
        pass

