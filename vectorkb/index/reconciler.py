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
Reconciler for a vector index that lives outside the provisioning tool.

Two layers:
- apply(): the fallible operation against the index store. Failures are
  returned as an IndexResult and written to the log, never raised.
- reconcile(): the event protocol boundary. It always reports SUCCESS so
  that an index store hiccup never rolls back the owning provisioning
  operation. A failed create leaves the resource without an index until
  the next Create/Update event for it.

The index store is the system of record; existence is queried on every
Create/Update and nothing is cached between invocations. Delete events only
carry the index name that matters; the rest of their properties are not
validated, so a rollback of a rejected Create can still complete.
"""

import logging
from typing import Any, Dict, Union

from vectorkb.custom_resource import ChangeType, ResourceChangeEvent, ResourceChangeResult
from vectorkb.exceptions import IndexNotFound
from vectorkb.index.base import IndexRef, IndexResult, IndexSpec, IndexStore, ReconcileOutcome
from vectorkb.index.mapping import IndexCreationRequest

logger = logging.getLogger(__name__)


def parse_change_event(payload: Dict[str, Any]) -> ResourceChangeEvent[Union[IndexSpec, IndexRef]]:
    """Validate a raw event; Delete events need nothing but the index name"""
    if payload.get("RequestType") == ChangeType.DELETE.value:
        return ResourceChangeEvent[IndexRef].model_validate(payload)
    return ResourceChangeEvent[IndexSpec].model_validate(payload)


class IndexReconciler:
    """Drives an external index toward the state implied by a change event"""

    def __init__(self, store: IndexStore):
        self.store = store

    def reconcile(self, event: ResourceChangeEvent[Union[IndexSpec, IndexRef]]) -> ResourceChangeResult:
        """
        Apply a change event and build its completion report

        Args:
            event: Create or Update event carrying an IndexSpec, or a Delete event carrying an IndexRef

        Returns:
            ResourceChangeResult: always SUCCESS, physical id is the index name
        """
        result = self.apply(event)
        if not result.success:
            logger.warning(
                f"Reporting success for {event.change_type.value} of index {result.index_name} "
                f"despite failure: {result.error}"
            )
        index_name = event.properties.index_name
        return ResourceChangeResult.success(event, physical_id=index_name, data={"IndexName": index_name})

    def apply(self, event: ResourceChangeEvent[Union[IndexSpec, IndexRef]]) -> IndexResult:
        spec = event.properties
        match event.change_type:
            case ChangeType.CREATE | ChangeType.UPDATE:
                return self.ensure_index(spec)
            case ChangeType.DELETE:
                return self.delete_index(spec)

    def ensure_index(self, spec: IndexSpec) -> IndexResult:
        """Create the index unless the store already has it"""
        try:
            if self.store.exists(spec.index_name):
                # Re-creation is a no-op; the existing mapping is left untouched
                logger.info(f"Index {spec.index_name} already exists")
                return IndexResult(success=True, outcome=ReconcileOutcome.ALREADY_PRESENT, index_name=spec.index_name)

            request = IndexCreationRequest.from_spec(spec)
            self.store.create(spec.index_name, request)
            logger.info(f"Index {spec.index_name} created with vector dimension {spec.vector_dimension}")
            return IndexResult(
                success=True,
                outcome=ReconcileOutcome.CREATED,
                index_name=spec.index_name,
                data=request.to_body(),
            )
        except Exception as e:
            logger.exception(f"Error creating index {spec.index_name}")
            return IndexResult(
                success=False,
                outcome=ReconcileOutcome.FAILED,
                index_name=spec.index_name,
                error=f"Index creation failed: {str(e)}",
            )

    def delete_index(self, spec: IndexRef) -> IndexResult:
        try:
            self.store.delete(spec.index_name)
            logger.info(f"Index {spec.index_name} deleted")
            return IndexResult(success=True, outcome=ReconcileOutcome.DELETED, index_name=spec.index_name)
        except IndexNotFound as e:
            logger.warning(f"Error deleting index {spec.index_name}: {e}")
            return IndexResult(
                success=False,
                outcome=ReconcileOutcome.FAILED,
                index_name=spec.index_name,
                error=f"Index deletion failed: {str(e)}",
            )
        except Exception as e:
            logger.exception(f"Error deleting index {spec.index_name}")
            return IndexResult(
                success=False,
                outcome=ReconcileOutcome.FAILED,
                index_name=spec.index_name,
                error=f"Index deletion failed: {str(e)}",
            )
