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

from vectorkb.policy.arn_resolver import ArnResolver
from vectorkb.policy.data_access_policy import AccessRule, DataAccessPolicy, GrantStatement, Permissions, ResourceType
from vectorkb.policy.principals import (
    AccountPrincipal,
    ArnPrincipal,
    Grantable,
    Group,
    Principal,
    Role,
    ServicePrincipal,
    User,
    parse_principal,
)

__all__ = [
    "AccessRule",
    "AccountPrincipal",
    "ArnPrincipal",
    "ArnResolver",
    "DataAccessPolicy",
    "GrantStatement",
    "Grantable",
    "Group",
    "Permissions",
    "Principal",
    "ResourceType",
    "Role",
    "ServicePrincipal",
    "User",
    "parse_principal",
]
