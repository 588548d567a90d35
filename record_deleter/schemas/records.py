from pydantic import BaseModel, ConfigDict, Field


class DeletionOutcome(BaseModel):
    id: str
    deleted: bool


class BatchDeletionEnvelope(BaseModel):
    records: list[DeletionOutcome]


class SingleDeleteResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    message: str
    deleted_record: DeletionOutcome = Field(alias="deletedRecord")


class BatchDeleteResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    message: str
    deleted_records: list[DeletionOutcome] = Field(alias="deletedRecords")

