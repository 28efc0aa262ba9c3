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

"""
External vector index lifecycle management

Key components:
- IndexRef: identifies one index by name
- IndexSpec: an IndexRef plus its field layout
- IndexStore: external index-management API (exists/create/delete)
- IndexReconciler: applies resource change events and always reports success
"""

from vectorkb.index.base import IndexRef, IndexResult, IndexSpec, IndexStore, ReconcileOutcome
from vectorkb.index.mapping import FieldMapping, FieldType, IndexCreationRequest, VectorMethod
from vectorkb.index.reconciler import IndexReconciler, parse_change_event

__all__ = [
    "FieldMapping",
    "FieldType",
    "IndexCreationRequest",
    "IndexReconciler",
    "IndexRef",
    "IndexResult",
    "IndexSpec",
    "IndexStore",
    "ReconcileOutcome",
    "VectorMethod",
    "parse_change_event",
]
