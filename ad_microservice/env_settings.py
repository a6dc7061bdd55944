from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .ad.models import ADConfig
from .ad_utils import get_base_dn


class EnvSettings(BaseSettings):
    ad_bind_username: str = Field(..., alias="AD_BIND_USERNAME")
    ad_bind_password: str = Field(..., alias="AD_BIND_PASSWORD")
    ad_domain_controller: str = Field(..., alias="AD_DOMAIN_CONTROLLER")
    ad_search_base: str = Field("", alias="AD_SEARCH_BASE")
    ad_domain: str = Field("", alias="AD_DOMAIN")
    ad_use_ssl: bool = Field(False, alias="AD_USE_SSL")
    ad_tls_validate: bool = Field(True, alias="AD_TLS_VALIDATE")
    ad_connect_timeout_s: Optional[float] = Field(None, alias="AD_CONNECT_TIMEOUT_S")
    ad_receive_timeout_s: Optional[float] = Field(None, alias="AD_RECEIVE_TIMEOUT_S")

    security_username: str = Field(..., alias="APP_SECURITY_USERNAME")
    security_password: str = Field(..., alias="APP_SECURITY_PASSWORD")

    log_level: str = Field("INFO", alias="LOG_LEVEL")
    log_dir: str = Field("", alias="LOG_DIR")
    log_retention_days: int = Field(30, alias="LOG_RETENTION_DAYS")

    http_host: str = Field("0.0.0.0", alias="HTTP_HOST")
    http_port: int = Field(8080, alias="HTTP_PORT")

    model_config = SettingsConfigDict(populate_by_name=True, env_file=".env", extra="ignore")

    @field_validator("ad_domain_controller", "ad_search_base", "ad_domain", "ad_bind_username")
    @classmethod
    def _strip(cls, v: str) -> str:
        return (v or "").strip()

    @property
    def search_base(self) -> str:
        return self.ad_search_base or get_base_dn(self.ad_domain)

    def ad_config(self) -> ADConfig:
        base = self.search_base
        if not base:
            raise ValueError("Search base is empty: set AD_SEARCH_BASE or AD_DOMAIN")
        return ADConfig(
            domain_controller=self.ad_domain_controller,
            bind_username=self.ad_bind_username,
            bind_password=self.ad_bind_password,
            search_base=base,
            use_ssl=self.ad_use_ssl,
            tls_validate=self.ad_tls_validate,
            connect_timeout_s=self.ad_connect_timeout_s,
            receive_timeout_s=self.ad_receive_timeout_s,
        )


@lru_cache(maxsize=1)
def get_env() -> EnvSettings:
    return EnvSettings()
