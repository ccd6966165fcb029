from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictInt, StrictStr


class _WireModel(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)


class ApplicationInformation(_WireModel):
    """Capabilities reported by a pasty instance."""

    modification_tokens: StrictBool = Field(alias="modificationTokens")
    # seconds, -1 means pastes never expire
    paste_lifetime: StrictInt = Field(alias="pasteLifetime")
    reports: StrictBool
    version: StrictStr


class PfEncryption(_WireModel):
    alg: StrictStr
    iv: StrictStr


class Metadata(_WireModel):
    pf_encryption: PfEncryption | None = None


class Paste(_WireModel):
    id: StrictStr
    content: StrictStr
    created: StrictInt = Field(ge=0, description="Unix seconds")
    metadata: Metadata | None = None


class CreatePasteRequest(_WireModel):
    """Body of both the create and the update call."""

    content: str
    metadata: Metadata | None = None

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


class CreatedPaste(_WireModel):
    """A freshly created paste and its one-time modification token.

    The server answers with a single flat object: the paste fields and
    ``modificationToken`` are siblings, so the same dict is read twice.
    """

    paste: Paste
    modification_token: StrictStr = Field(alias="modificationToken")

    @classmethod
    def from_flat(cls, data: Any) -> CreatedPaste:
        paste = Paste.model_validate(data)
        return cls.model_validate({"paste": paste, "modificationToken": data.get("modificationToken")})

    def to_flat(self) -> dict[str, Any]:
        data = self.paste.model_dump(by_alias=True)
        data["modificationToken"] = self.modification_token
        return data
