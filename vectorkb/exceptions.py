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

from typing import Any


class VectorKBError(Exception):
    """Base class for all vectorkb errors"""


class ConfigurationError(VectorKBError):
    """Raised at process start when required configuration is missing or invalid"""


class UnresolvableArn(VectorKBError):
    """Raised when a principal cannot be turned into an identity ARN"""

    def __init__(self, principal: Any):
        self.principal = principal
        super().__init__(f"Unable to extract ARN from principal: {principal!r}")


class InvalidIngestionRequest(VectorKBError, ValueError):
    """Raised when the knowledge base or data source id is malformed"""


class IngestionStartFailed(VectorKBError):
    """Raised when the ingestion API rejects or fails a start-ingestion-job call"""

    def __init__(self, knowledge_base_id: str, data_source_id: str, reason: str):
        self.knowledge_base_id = knowledge_base_id
        self.data_source_id = data_source_id
        super().__init__(
            f"Failed to start ingestion job for knowledge base {knowledge_base_id}, "
            f"data source {data_source_id}: {reason}"
        )


class IndexNotFound(VectorKBError):
    """Raised by an index store when the named index does not exist"""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Index {name} not found")
