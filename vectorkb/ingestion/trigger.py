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
Starts knowledge base ingestion (data sync) jobs.

Fired once after a data source is created and then on a schedule. There is
no retry and no idempotency token: the ingestion API queues or rejects
overlapping jobs itself, so firing more than once is harmless.
"""

import logging
from typing import Any, Dict, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from vectorkb.exceptions import IngestionStartFailed, InvalidIngestionRequest

logger = logging.getLogger(__name__)

# Knowledge base and data source ids are ten alphanumeric characters
RESOURCE_ID_PATTERN = r"^[0-9a-zA-Z]{10}$"


class StartIngestionJobRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="ignore")

    knowledge_base_id: str = Field(alias="knowledgeBaseId", pattern=RESOURCE_ID_PATTERN)
    data_source_id: str = Field(alias="dataSourceId", pattern=RESOURCE_ID_PATTERN)

    @classmethod
    def parse(cls, payload: Dict[str, Any]) -> "StartIngestionJobRequest":
        try:
            return cls.model_validate(payload)
        except ValidationError as e:
            raise InvalidIngestionRequest(f"Invalid start ingestion job request: {e}") from e


class BedrockIngestionClient:
    """Thin wrapper over the bedrock-agent start_ingestion_job API"""

    def __init__(self, region_name: Optional[str] = None, client=None):
        self.region_name = region_name
        self._client = client

    @property
    def client(self):
        if self._client is None:
            self._client = boto3.client("bedrock-agent", region_name=self.region_name)
        return self._client

    def start_job(self, knowledge_base_id: str, data_source_id: str) -> Dict[str, Any]:
        response = self.client.start_ingestion_job(knowledgeBaseId=knowledge_base_id, dataSourceId=data_source_id)
        return response.get("ingestionJob", {})


class IngestionTrigger:
    def __init__(self, client: BedrockIngestionClient):
        self.client = client

    def trigger(self, knowledge_base_id: str, data_source_id: str) -> None:
        """
        Start one ingestion job

        Args:
            knowledge_base_id: Knowledge base id
            data_source_id: Data source id within the knowledge base

        Raises:
            InvalidIngestionRequest: if either id is malformed
            IngestionStartFailed: if the ingestion API call fails
        """
        request = StartIngestionJobRequest.parse(
            {"knowledge_base_id": knowledge_base_id, "data_source_id": data_source_id}
        )
        self.trigger_request(request)

    def trigger_request(self, request: StartIngestionJobRequest) -> None:
        try:
            job = self.client.start_job(request.knowledge_base_id, request.data_source_id)
        except (ClientError, BotoCoreError) as e:
            logger.error(
                f"Start ingestion job failed for knowledge base {request.knowledge_base_id}, "
                f"data source {request.data_source_id}: {e}"
            )
            raise IngestionStartFailed(request.knowledge_base_id, request.data_source_id, str(e)) from e

        logger.info(
            f"Started ingestion job {job.get('ingestionJobId', '<unknown>')} "
            f"for knowledge base {request.knowledge_base_id}, data source {request.data_source_id} "
            f"(status {job.get('status', '<unknown>')})"
        )
