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
Function entry points that start knowledge base ingestion jobs

- custom_resource_handler: syncs a data source once, right after it is created
- scheduled_handler: timer target, syncs on every invocation

Failures are not contained here: a failed start surfaces to the caller.
"""

import json
import logging
from typing import Any, Dict

from vectorkb.config import configure_logging, load_ingestion_settings
from vectorkb.custom_resource import ChangeType, ResourceChangeEvent, ResourceChangeResult
from vectorkb.ingestion.trigger import BedrockIngestionClient, IngestionTrigger, StartIngestionJobRequest

logger = logging.getLogger(__name__)

settings = load_ingestion_settings()
configure_logging(settings.log_level)

# Global instance
ingestion_trigger = IngestionTrigger(BedrockIngestionClient(region_name=settings.aws_region))


def custom_resource_handler(event: Dict[str, Any], context: Any = None) -> Dict[str, Any]:
    logger.info(f"Received event: {json.dumps(event, default=str)}")
    change_event = ResourceChangeEvent[Dict[str, Any]].model_validate(event)

    if change_event.change_type == ChangeType.CREATE:
        request = StartIngestionJobRequest.parse(change_event.properties)
        ingestion_trigger.trigger_request(request)
        physical_id = request.data_source_id
    else:
        # Updates and deletes never start a sync, so their properties are not validated
        physical_id = str(
            change_event.properties.get("dataSourceId") or change_event.physical_id or change_event.logical_id
        )
        logger.info(f"Nothing to do for {change_event.change_type.value} of data source {physical_id}")

    return ResourceChangeResult.success(change_event, physical_id=physical_id).to_response()


def scheduled_handler(event: Dict[str, Any], context: Any = None) -> None:
    logger.info(f"Received event: {json.dumps(event, default=str)}")
    request = StartIngestionJobRequest.parse(event)
    ingestion_trigger.trigger_request(request)
