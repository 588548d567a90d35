from pydantic import BaseModel


class HealthResponse(BaseModel):
    status: str
    timestamp: str


class VersionResponse(BaseModel):
    service: str
    version: str


class IndexResponse(BaseModel):
    message: str
    endpoints: dict[str, str]
