"""Pydantic models describing indexer payloads and ARC-69 note properties."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime  # noqa: TC003
from typing import Literal, cast

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from edensync.domain.growth import DEFAULT_GROWTH_MODEL_ID
from edensync.domain.model import QuantityClass

DEFAULT_POD_ICON = "🌱"


def _without_nulls(value: object) -> object:
    if isinstance(value, Mapping):
        mapping_value = cast(Mapping[str, object], value)
        return {key: item for key, item in mapping_value.items() if item is not None}
    return value


class IndexerBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class AssetPayload(IndexerBaseModel):
    index: int
    deleted: bool = False


class AssetsResponse(IndexerBaseModel):
    assets: list[AssetPayload] = Field(default_factory=list[AssetPayload])
    next_token: str | None = Field(default=None, alias="next-token")


class TransactionPayload(IndexerBaseModel):
    id: str
    note: str | None = None
    round_time: int = Field(default=0, alias="round-time")
    tx_type: str | None = Field(default=None, alias="tx-type")
    sender: str | None = None


class TransactionsResponse(IndexerBaseModel):
    transactions: list[TransactionPayload] = Field(default_factory=list[TransactionPayload])
    next_token: str | None = Field(default=None, alias="next-token")


class Arc69Note(IndexerBaseModel):
    standard: Literal["arc69"]
    description: str | None = None
    external_url: str | None = None
    properties: dict[str, object]


class NoteProperties(IndexerBaseModel):
    eden_type: str
    eden_version: int = 1

    @model_validator(mode="before")
    @classmethod
    def drop_nulls(cls, value: object) -> object:
        return _without_nulls(value)


class ThrowProperties(NoteProperties):
    eden_type: Literal["throw"] = "throw"
    pod_type_id: str = Field(default="", alias="podTypeId")
    pod_type_name: str = Field(default="", alias="podTypeName")
    pod_type_icon: str = Field(default=DEFAULT_POD_ICON, alias="podTypeIcon")
    throw_date: datetime | None = Field(default=None, alias="throwDate")
    location_label: str = Field(default="", alias="locationLabel")
    growth_model_id: str = Field(default=DEFAULT_GROWTH_MODEL_ID, alias="growthModelId")
    thrown_by: str = Field(default="", alias="thrownBy")
    version: int = 1


class HarvestProperties(NoteProperties):
    eden_type: Literal["harvest"] = "harvest"
    throw_asa_id: int = Field(default=0, alias="throwAsaId")
    plant_id: str = Field(default="", alias="plantId")
    quantity_class: QuantityClass = Field(default=QuantityClass.SMALL, alias="quantityClass")
    harvested_at: datetime | None = Field(default=None, alias="harvestedAt")
    notes: str = ""

    @field_validator("throw_asa_id", mode="before")
    @classmethod
    def _parse_asa_id(cls, value: int | float | str) -> int:
        return int(value)
