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
Resource change event protocol.

A provisioning framework delivers one ResourceChangeEvent per invocation
(at least once, possibly redelivered) and expects one ResourceChangeResult
back. Wire keys follow the custom resource provider contract.
"""

from enum import Enum
from typing import Any, Dict, Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field

PropertiesT = TypeVar("PropertiesT")


class ChangeType(str, Enum):
    CREATE = "Create"
    UPDATE = "Update"
    DELETE = "Delete"


class ResponseStatus(str, Enum):
    SUCCESS = "SUCCESS"
    FAILED = "FAILED"


class ResourceChangeEvent(BaseModel, Generic[PropertiesT]):
    """One create/update/delete request for a logical resource"""

    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="ignore")

    change_type: ChangeType = Field(alias="RequestType")
    properties: PropertiesT = Field(alias="ResourceProperties")
    request_id: str = Field(alias="RequestId")
    logical_id: str = Field(alias="LogicalResourceId")
    stack_id: Optional[str] = Field(default=None, alias="StackId")
    physical_id: Optional[str] = Field(default=None, alias="PhysicalResourceId")
    resource_type: Optional[str] = Field(default=None, alias="ResourceType")
    old_properties: Optional[Dict[str, Any]] = Field(default=None, alias="OldResourceProperties")


class ResourceChangeResult(BaseModel):
    """Completion report for one ResourceChangeEvent"""

    model_config = ConfigDict(populate_by_name=True)

    status: ResponseStatus = Field(alias="Status")
    request_id: str = Field(alias="RequestId")
    logical_id: str = Field(alias="LogicalResourceId")
    physical_id: str = Field(alias="PhysicalResourceId")
    stack_id: Optional[str] = Field(default=None, alias="StackId")
    data: Dict[str, Any] = Field(default_factory=dict, alias="Data")
    reason: Optional[str] = Field(default=None, alias="Reason")

    @classmethod
    def success(
        cls, event: ResourceChangeEvent, physical_id: str, data: Optional[Dict[str, Any]] = None
    ) -> "ResourceChangeResult":
        return cls(
            status=ResponseStatus.SUCCESS,
            request_id=event.request_id,
            logical_id=event.logical_id,
            physical_id=physical_id,
            stack_id=event.stack_id,
            data=data or {},
        )

    def to_response(self) -> Dict[str, Any]:
        """Serialize with the provider contract's wire keys"""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
