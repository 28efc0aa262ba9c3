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
Principal references that can be granted access to a collection.

Principal is a closed union. Any other object exposing a string ``arn``
attribute is accepted by the resolver as a last resort.
"""

import re
from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class AccountPrincipal:
    account_id: str


@dataclass(frozen=True)
class ArnPrincipal:
    arn: str


@dataclass(frozen=True)
class ServicePrincipal:
    service: str  # e.g. bedrock.amazonaws.com


@dataclass(frozen=True)
class Role:
    role_arn: str


@dataclass(frozen=True)
class User:
    user_arn: str


@dataclass(frozen=True)
class Group:
    group_arn: str


@dataclass(frozen=True)
class Grantable:
    """Anything that acts through another principal, e.g. a function and its execution role"""
    grant_principal: "Principal"


Principal = Union[AccountPrincipal, ArnPrincipal, ServicePrincipal, Role, User, Group, Grantable]

_ACCOUNT_ID = re.compile(r"^\d{12}$")
_IAM_ARN = re.compile(r"^arn:[\w-]+:iam::\d{12}:(?P<kind>role|user|group)/.+$")


def parse_principal(text: str) -> Principal:
    """
    Interpret an operator-supplied principal string

    Args:
        text: account id, service host name or ARN

    Returns:
        The most specific Principal variant for the string
    """
    text = text.strip()
    if _ACCOUNT_ID.match(text):
        return AccountPrincipal(text)
    if text.endswith(".amazonaws.com") and not text.startswith("arn:"):
        return ServicePrincipal(text)

    match = _IAM_ARN.match(text)
    if match:
        kind = match.group("kind")
        if kind == "role":
            return Role(text)
        if kind == "user":
            return User(text)
        return Group(text)

    if text.startswith("arn:"):
        return ArnPrincipal(text)
    raise ValueError(f"Unrecognized principal: {text!r}")
