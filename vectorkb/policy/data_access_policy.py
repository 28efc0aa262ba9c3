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
Data access policy for a vector search collection.

A DataAccessPolicy accumulates one grant statement per grant call, in call
order, and republishes the whole serialized document after every call.
Statements are never merged or removed, so the same principal may appear
in several statements.

Instances are meant for a single provisioning session on one thread; no
locking is done.
"""

import hashlib
import json
import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, FrozenSet, List, Optional, Tuple

from vectorkb.policy.arn_resolver import ArnResolver

logger = logging.getLogger(__name__)

POLICY_TYPE = "data"
MAX_POLICY_NAME_LENGTH = 31
NAME_HASH_LENGTH = 8


class ResourceType(str, Enum):
    COLLECTION = "collection"
    INDEX = "index"


class Permissions:
    COLLECTION_READ = ("aoss:DescribeCollectionItems",)
    COLLECTION_READ_WRITE = COLLECTION_READ + (
        "aoss:CreateCollectionItems",
        "aoss:DeleteCollectionItems",
        "aoss:UpdateCollectionItems",
        "aoss:*",
    )

    INDEX_READ = ("aoss:DescribeIndex", "aoss:ReadDocument")
    INDEX_READ_WRITE = INDEX_READ + (
        "aoss:CreateIndex",
        "aoss:WriteDocument",
        "aoss:DeleteIndex",
        "aoss:UpdateIndex",
    )


@dataclass(frozen=True)
class AccessRule:
    resource_type: ResourceType
    resources: Tuple[str, ...]
    permissions: Tuple[str, ...]

    @property
    def permission_set(self) -> FrozenSet[str]:
        return frozenset(self.permissions)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "Resource": list(self.resources),
            "Permission": list(self.permissions),
            "ResourceType": self.resource_type.value,
        }


@dataclass(frozen=True)
class GrantStatement:
    rules: Tuple[AccessRule, ...]
    principals: Tuple[str, ...]
    description: Optional[str] = None

    def rule_for(self, resource_type: ResourceType) -> AccessRule:
        for rule in self.rules:
            if rule.resource_type == resource_type:
                return rule
        raise KeyError(f"No {resource_type.value} rule in statement")

    def to_dict(self) -> Dict[str, Any]:
        statement = {
            "Rules": [rule.to_dict() for rule in self.rules],
            "Principal": list(self.principals),
        }
        if self.description:
            statement["Description"] = self.description
        return statement


def normalize_policy_name(name: str) -> str:
    """
    Lower-case the name and replace characters the store rejects

    Names longer than the store allows are shortened and given a hash suffix
    of the requested name, so names sharing a long prefix stay distinct.

    Raises:
        ValueError: if nothing usable is left of the name
    """
    normalized = re.sub(r"[^a-z0-9-]+", "-", name.lower()).strip("-")
    if not normalized:
        raise ValueError(f"Policy name {name!r} has no letters or digits")
    if len(normalized) <= MAX_POLICY_NAME_LENGTH:
        return normalized

    suffix = hashlib.sha256(name.encode("utf-8")).hexdigest()[:NAME_HASH_LENGTH]
    prefix = normalized[: MAX_POLICY_NAME_LENGTH - NAME_HASH_LENGTH - 1].rstrip("-")
    return f"{prefix}-{suffix}"


class DataAccessPolicy:
    """Aggregates per-principal grants on one collection into a data access policy document"""

    def __init__(self, collection_name: str, resolver: ArnResolver, name: Optional[str] = None):
        self.collection_name = collection_name
        self.resolver = resolver
        self.name = normalize_policy_name(name or f"{collection_name}-access")
        self._statements: List[GrantStatement] = []
        self.policy = json.dumps([])

    @property
    def statements(self) -> Tuple[GrantStatement, ...]:
        return tuple(self._statements)

    @property
    def collection_resource(self) -> str:
        return f"collection/{self.collection_name}"

    @property
    def index_resource(self) -> str:
        return f"index/{self.collection_name}/*"

    def grant_read(self, principal: Any, description: Optional[str] = None) -> None:
        """Grant read-only access to the collection and its indexes"""
        self._grant(principal, Permissions.COLLECTION_READ, Permissions.INDEX_READ, description)

    def grant_read_write(self, principal: Any, description: Optional[str] = None) -> None:
        """Grant read, create, update and delete access to the collection and its indexes"""
        self._grant(principal, Permissions.COLLECTION_READ_WRITE, Permissions.INDEX_READ_WRITE, description)

    def _grant(
        self,
        principal: Any,
        collection_permissions: Tuple[str, ...],
        index_permissions: Tuple[str, ...],
        description: Optional[str],
    ):
        # Resolution errors propagate before anything is appended
        arn = self.resolver.resolve(principal)
        statement = GrantStatement(
            rules=(
                AccessRule(ResourceType.COLLECTION, (self.collection_resource,), collection_permissions),
                AccessRule(ResourceType.INDEX, (self.index_resource,), index_permissions),
            ),
            principals=(arn,),
            description=description,
        )
        self._statements.append(statement)
        self.policy = json.dumps(self.to_document())
        logger.debug(f"Granted {arn} access to {self.collection_resource} ({len(self._statements)} statements)")

    def to_document(self) -> List[Dict[str, Any]]:
        return [statement.to_dict() for statement in self._statements]

    def to_cfn_properties(self) -> Dict[str, str]:
        return {"Name": self.name, "Type": POLICY_TYPE, "Policy": self.policy}
