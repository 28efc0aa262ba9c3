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

from vectorkb.exceptions import UnresolvableArn
from vectorkb.policy.principals import (
    AccountPrincipal,
    ArnPrincipal,
    Grantable,
    Group,
    Role,
    ServicePrincipal,
    User,
)


class ArnResolver:
    """Resolves a principal reference to the identity string used in access policies"""

    def __init__(self, account_id: str, partition: str = "aws"):
        self.account_id = account_id
        self.partition = partition

    def resolve(self, principal: Any) -> str:
        """
        Resolve a principal to its identity ARN

        The match arms are ordered from most to least specific; the generic
        ``arn`` attribute is only consulted when no variant matched.

        Raises:
            UnresolvableArn: if the principal is none of the known variants and has no string arn
        """
        match principal:
            case AccountPrincipal(account_id=account_id):
                return f"arn:{self.partition}:iam::{account_id}:root"
            case ArnPrincipal(arn=arn):
                return arn
            case ServicePrincipal(service=service):
                # Service principals have no ARN of their own; use the service role path in this account
                return f"arn:{self.partition}:iam::{self.account_id}:role/service-role/{service}"
            case Role(role_arn=arn) | User(user_arn=arn) | Group(group_arn=arn):
                return arn
            case Grantable(grant_principal=inner):
                return self.resolve(inner)
            case _:
                arn = getattr(principal, "arn", None)
                if isinstance(arn, str):
                    return arn
                raise UnresolvableArn(principal)
