# comissoes/config.py
from pydantic_settings import BaseSettings
from functools import lru_cache
from typing import List


class Settings(BaseSettings):
    # --- Identificação do Ambiente ---
    APP_NAME: str = "Comissões - Motor de Cálculo"

    # --- Logs ---
    LOG_LEVEL: str = "INFO"
    LOG_DIR: str = "logs"
    LOG_TO_FILE: bool = True

    # --- Parametrização padrão de comissões ---
    # Usada apenas quando a organização não informa a própria configuração.
    # 'table_value' = % sobre valor tabela, 'commission_value' = % sobre comissão da empresa
    DEFAULT_COMMISSION_BASIS: str = "table_value"
    DEFAULT_OVER_SHARE_PERCENT: float = 10.0

    # --- API ---
    CORS_ORIGINS: List[str] = ["*"]

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


@lru_cache()
def get_settings():
    return Settings()


# Instância global
settings = get_settings()
