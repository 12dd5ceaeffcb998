"""
Pydantic Schemas - FemaWebDeclarationAreas Records and Envelopes

Defines the Pydantic schemas used to validate OpenFEMA responses:
- Entry: one declaration-area record
- Metadata: pagination/query echo returned with the first page
- MetadataResponse / PlainResponse: the two envelope shapes of the endpoint

Field names match the API wire names so that exported files can be parsed
back with the same schema.

Usage:
    from utils.schemas import MetadataResponse

    page = MetadataResponse.model_validate(payload)
    total = page.metadata.count
"""

from typing import Optional, Union

from pydantic import (
    AwareDatetime,
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    StrictInt,
    StrictStr,
)

ENTRIES_FIELD = "FemaWebDeclarationAreas"


class Entry(BaseModel):
    """Disaster declaration area record.

    All fields are required. Integers and strings are validated strictly and
    every timestamp must carry a timezone.
    """

    model_config = ConfigDict(frozen=True)

    disasterNumber: StrictInt = Field(..., description="Disaster number")
    programTypeCode: StrictStr = Field(..., description="Program type code")
    programTypeDescription: StrictStr = Field(..., description="Program type description")
    stateCode: StrictStr = Field(..., description="State code")
    placeCode: StrictStr = Field(..., description="Place code")
    placeName: StrictStr = Field(..., description="Place name")
    designatedDate: AwareDatetime = Field(..., description="Date the area was designated")
    entryDate: AwareDatetime = Field(..., description="Date the record was entered")
    updateDate: AwareDatetime = Field(..., description="Date the record was last updated")
    hash: StrictStr = Field(..., description="Content hash")
    lastRefresh: AwareDatetime = Field(..., description="Last refresh timestamp")
    id: StrictStr = Field(..., description="Record identifier")


# Column order for exports
ENTRY_FIELDS: tuple[str, ...] = tuple(Entry.model_fields)


class Metadata(BaseModel):
    """Server-side pagination and query state.

    Only ``count`` drives pagination; the rest is echoed back by the server.
    """

    skip: StrictInt
    top: StrictInt
    count: StrictInt = Field(..., description="Total number of matching records")
    filter: StrictStr
    format: StrictStr
    metadata: StrictBool
    orderby: dict[str, str]
    select: StrictStr
    entityname: StrictStr
    version: StrictStr
    url: StrictStr
    rundate: AwareDatetime
    DeprecationInformation: dict[str, Optional[str]]


class MetadataResponse(BaseModel):
    """First page envelope, requested with ``$metadata=on``."""

    model_config = ConfigDict(populate_by_name=True)

    metadata: Metadata
    entries: list[Entry] = Field(..., alias=ENTRIES_FIELD)


class PlainResponse(BaseModel):
    """Envelope for every page after the first, requested with ``$metadata=off``."""

    model_config = ConfigDict(populate_by_name=True)

    entries: list[Entry] = Field(..., alias=ENTRIES_FIELD)


PageResponse = Union[MetadataResponse, PlainResponse]
