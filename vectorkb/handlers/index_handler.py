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
Function entry point for the vector index custom resource.

Configuration (OPENSEARCH_DOMAIN, AWS_REGION) is loaded at import, so a
missing value fails the cold start instead of individual events.
"""

import json
import logging
from typing import Any, Dict

from vectorkb.config import configure_logging, load_index_store_settings
from vectorkb.index.opensearch_store import OpenSearchIndexStore
from vectorkb.index.reconciler import IndexReconciler, parse_change_event

logger = logging.getLogger(__name__)

settings = load_index_store_settings()
configure_logging(settings.log_level)

# Global instance
index_reconciler = IndexReconciler(OpenSearchIndexStore.from_settings(settings))


def handler(event: Dict[str, Any], context: Any = None) -> Dict[str, Any]:
    logger.info(f"Received event: {json.dumps(event, default=str)}")
    change_event = parse_change_event(event)
    result = index_reconciler.reconcile(change_event)
    return result.to_response()
