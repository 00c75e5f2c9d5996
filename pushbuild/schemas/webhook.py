from pydantic import BaseModel


class RepositoryInfo(BaseModel):
    git_ssh_url: str
    git_http_url: str


class PushEvent(BaseModel):
    object_kind: str
    ref: str
    repository: RepositoryInfo
