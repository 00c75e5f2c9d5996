import os
import yaml
from pathlib import Path
from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict
from yaml import YAMLError

from pushbuild.exceptions import ConfigurationError


class RepoSettings(BaseModel):
    model_config = ConfigDict(frozen=True)

    match_url: str
    clone_url: str
    deploy_user: str
    deploy_token: str

    @property
    def resolved_clone_url(self) -> str:
        return self.clone_url.replace('{username}', self.deploy_user).replace(
            '{password}', self.deploy_token
        )


class Config(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix='PUSHBUILD_', env_file='.env', extra='ignore'
    )

    host: str = '0.0.0.0'
    port: int = 80
    debug: bool = False

    repos: list[RepoSettings] = []
    # One directory per platform, each holding the Dockerfile used for it
    dockerfiles_dir: Path = Path('../dockerfiles/dockerfiles')
    container_bin: str = 'docker'
    max_parallel_runs: int = Field(default=4, ge=1)


def load_config(file: Path) -> Config:
    if file.is_file():
        try:
            config_values = yaml.safe_load(file.read_text()) or {}
        except YAMLError as e:
            raise ConfigurationError(f'{file}: {e}')
        if not isinstance(config_values, dict):
            raise ConfigurationError(f'{file}: expected a mapping at the top level')
    else:
        config_values = {}
    try:
        return Config(**config_values)
    except ValidationError as e:
        raise ConfigurationError(str(e))


config_file = Path(os.getenv('PUSHBUILD_CONFIG') or 'repositories.yml')
config = load_config(config_file)

__all__ = ['Config', 'RepoSettings', 'config', 'load_config']
