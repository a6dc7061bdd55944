from __future__ import annotations

import uuid
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from .ad.models import Computer, User


class EntityResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    error: Optional[str] = Field(default=None)

    def dump(self) -> dict[str, Any]:
        """JSON-ready dict with wire (camelCase) names; unset/None fields omitted."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class UserResponse(EntityResponse):
    username: Optional[str] = Field(default=None)
    givenname: Optional[str] = Field(default=None)
    mail: Optional[str] = Field(default=None)
    cn: Optional[str] = Field(default=None)
    sn: Optional[str] = Field(default=None)
    display_name: Optional[str] = Field(default=None, alias="displayName")
    disabled: Optional[bool] = Field(default=None)
    last_logon: Optional[str] = Field(default=None, alias="lastLogon")
    when_created: Optional[str] = Field(default=None, alias="whenCreated")
    guid: Optional[uuid.UUID] = Field(default=None)

    @classmethod
    def from_user(cls, user: User) -> "UserResponse":
        return cls(
            username=user.username,
            givenname=user.givenname,
            mail=user.mail,
            cn=user.cn,
            sn=user.sn,
            display_name=user.display_name,
            disabled=user.disabled,
            last_logon=user.last_logon_formatted,
            when_created=user.when_created_formatted,
            guid=user.guid,
        )


class ComputerResponse(EntityResponse):
    cn: Optional[str] = Field(default=None)
    disabled: Optional[bool] = Field(default=None)
    logon_count: Optional[int] = Field(default=None, alias="logonCount")
    operating_system: Optional[str] = Field(default=None, alias="operatingSystem")
    operating_system_version: Optional[str] = Field(default=None, alias="operatingSystemVersion")
    guid: Optional[uuid.UUID] = Field(default=None)
    last_logon: Optional[str] = Field(default=None, alias="lastLogon")
    when_created: Optional[str] = Field(default=None, alias="whenCreated")

    @classmethod
    def from_computer(cls, computer: Computer) -> "ComputerResponse":
        return cls(
            cn=computer.cn,
            disabled=computer.disabled,
            logon_count=computer.logon_count,
            operating_system=computer.operating_system,
            operating_system_version=computer.operating_system_version,
            guid=computer.guid,
            last_logon=computer.last_logon_formatted,
            when_created=computer.when_created_formatted,
        )
