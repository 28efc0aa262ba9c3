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

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from vectorkb.index.base import IndexSpec


class FieldType(str, Enum):
    TEXT = "text"
    KNN_VECTOR = "knn_vector"


@dataclass(frozen=True)
class VectorMethod:
    """Approximate nearest neighbour method for a knn_vector field"""
    name: str = "hnsw"
    space_type: str = "l2"
    engine: str = "faiss"

    def to_dict(self) -> Dict[str, str]:
        return {"name": self.name, "space_type": self.space_type, "engine": self.engine}


@dataclass(frozen=True)
class FieldMapping:
    name: str
    type: FieldType
    indexed: bool = True
    dimension: Optional[int] = None
    method: Optional[VectorMethod] = None

    def to_dict(self) -> Dict[str, Any]:
        if self.type == FieldType.KNN_VECTOR:
            return {"type": self.type.value, "dimension": self.dimension, "method": self.method.to_dict()}
        return {"type": self.type.value, "index": self.indexed}


@dataclass(frozen=True)
class IndexCreationRequest:
    """Settings and field mapping sent with a create-index call"""
    fields: List[FieldMapping] = field(default_factory=list)
    knn: bool = True

    @classmethod
    def from_spec(cls, spec: IndexSpec, method: VectorMethod = None) -> "IndexCreationRequest":
        return cls(
            fields=[
                # Metadata is stored with the document but not searchable
                FieldMapping(spec.metadata_field, FieldType.TEXT, indexed=False),
                FieldMapping(spec.text_field, FieldType.TEXT, indexed=True),
                FieldMapping(
                    spec.vector_field,
                    FieldType.KNN_VECTOR,
                    dimension=spec.vector_dimension,
                    method=method or VectorMethod(),
                ),
            ]
        )

    @property
    def vector_fields(self) -> List[FieldMapping]:
        return [f for f in self.fields if f.type == FieldType.KNN_VECTOR]

    def to_body(self) -> Dict[str, Any]:
        return {
            "settings": {"index": {"knn": self.knn}},
            "mappings": {"properties": {f.name: f.to_dict() for f in self.fields}},
        }
