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
Celery tasks entry points
Scheduled data sync only starts the job; retries are left to the next beat
"""

import logging

from config.celery import app, settings
from vectorkb.ingestion.trigger import BedrockIngestionClient, IngestionTrigger

logger = logging.getLogger(__name__)

ingestion_trigger = IngestionTrigger(BedrockIngestionClient(region_name=settings.aws_region))


@app.task
def start_ingestion_job_task(knowledge_base_id: str, data_source_id: str) -> None:
    """
    Start ingestion job task entry point

    Args:
        knowledge_base_id: Knowledge base to sync
        data_source_id: Data source within the knowledge base
    """
    try:
        ingestion_trigger.trigger(knowledge_base_id, data_source_id)
    except Exception as e:
        logger.error(f"Scheduled sync failed for {knowledge_base_id}/{data_source_id}: {e}", exc_info=True)
        raise
