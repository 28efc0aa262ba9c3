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

import logging
from typing import Optional
from urllib.parse import urlparse

import boto3
from opensearchpy import AWSV4SignerAuth, NotFoundError, OpenSearch, RequestsHttpConnection

from vectorkb.config import IndexStoreSettings
from vectorkb.exceptions import IndexNotFound
from vectorkb.index.base import IndexStore
from vectorkb.index.mapping import IndexCreationRequest

logger = logging.getLogger(__name__)

# Signing service name for OpenSearch Serverless collections
AOSS_SERVICE = "aoss"


def parse_endpoint(endpoint: str):
    """Split a collection endpoint into (host, port); bare host names are accepted"""
    parsed = urlparse(endpoint if "://" in endpoint else f"https://{endpoint}")
    if not parsed.hostname:
        raise ValueError(f"Invalid index store endpoint: {endpoint!r}")
    return parsed.hostname, parsed.port or 443


class OpenSearchIndexStore(IndexStore):
    """Index store backed by an OpenSearch Serverless collection, signed with SigV4"""

    def __init__(self, endpoint: str, region: str, client: Optional[OpenSearch] = None):
        self.host, self.port = parse_endpoint(endpoint)
        self.region = region
        self._client = client

    @classmethod
    def from_settings(cls, settings: IndexStoreSettings) -> "OpenSearchIndexStore":
        return cls(settings.opensearch_domain, settings.aws_region)

    @property
    def client(self) -> OpenSearch:
        # Built on first use so that credentials are only looked up when an event arrives
        if self._client is None:
            credentials = boto3.Session().get_credentials()
            self._client = OpenSearch(
                hosts=[{"host": self.host, "port": self.port}],
                http_auth=AWSV4SignerAuth(credentials, self.region, AOSS_SERVICE),
                use_ssl=True,
                verify_certs=True,
                connection_class=RequestsHttpConnection,
                pool_maxsize=20,
            )
        return self._client

    def exists(self, name: str) -> bool:
        return bool(self.client.indices.exists(index=name))

    def create(self, name: str, request: IndexCreationRequest) -> None:
        logger.info(f"Creating index {name} on {self.host}")
        self.client.indices.create(index=name, body=request.to_body())

    def delete(self, name: str) -> None:
        logger.info(f"Deleting index {name} on {self.host}")
        try:
            self.client.indices.delete(index=name)
        except NotFoundError as e:
            raise IndexNotFound(name) from e
