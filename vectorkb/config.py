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
Process configuration for the index and ingestion entry points.

Settings are read once, at process start, from the environment and an
optional .env file. Missing required values are fatal for the process and
are never reported per event.
"""

import logging
from typing import List, Optional

from pydantic import BaseModel, Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from vectorkb.exceptions import ConfigurationError

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class IndexStoreSettings(BaseSettings):
    """Settings consumed by the index custom resource handler"""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    opensearch_domain: str = Field(min_length=1)  # collection endpoint, e.g. https://abc.us-east-1.aoss.amazonaws.com
    aws_region: str = Field(min_length=1)
    log_level: str = "INFO"


class SyncSchedule(BaseModel):
    """One knowledge base data source synced on a cron schedule"""

    knowledge_base_id: str
    data_source_id: str
    cron: str = "0 * * * *"


class IngestionSettings(BaseSettings):
    """Settings consumed by the ingestion handlers and the celery worker"""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    aws_region: Optional[str] = None
    log_level: str = "INFO"
    celery_broker_url: str = "redis://localhost:6379/0"
    ingestion_sync_schedules: List[SyncSchedule] = []


def _load(settings_class):
    try:
        return settings_class()
    except ValidationError as e:
        fields = sorted({".".join(str(part) for part in error["loc"]).upper() for error in e.errors()})
        raise ConfigurationError(f"Invalid or missing configuration for: {', '.join(fields)}") from e


def load_index_store_settings() -> IndexStoreSettings:
    return _load(IndexStoreSettings)


def load_ingestion_settings() -> IngestionSettings:
    return _load(IngestionSettings)


def configure_logging(level: str = "INFO"):
    """Install the default log format and set the root level.

    The function runtime pre-installs a root handler, in which case only the
    level is changed.
    """
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
    logging.getLogger().setLevel(level.upper())
