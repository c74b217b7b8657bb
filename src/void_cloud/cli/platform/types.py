"""Data types for Platform API contracts."""

from pydantic import BaseModel, Field, RootModel


class User(BaseModel):
    """Identity returned by ``account/me``."""

    id: int
    name: str


class DeployEntry(BaseModel):
    """Fingerprint of a single file in a deployment."""

    path: str
    blake3: str
    content_length: int = Field(alias="contentLength")

    model_config = {"populate_by_name": True}


Manifest = list[DeployEntry]


class DeployResult(BaseModel):
    """Response from activating a deployment."""

    deploy_id: int = Field(alias="deployID")
    slug: str
    url: str
    manifest: list[DeployEntry] = Field(default_factory=list)

    model_config = {"populate_by_name": True}


class StoredCredentials(RootModel[dict[str, dict[str, str]]]):
    """Contents of the credentials file: server name to ``{key: value}``."""
