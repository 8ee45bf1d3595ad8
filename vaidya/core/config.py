from typing import Optional
from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

UPDATE_POLICIES = ("legacy", "strict")


class Settings(BaseSettings):
    # Database
    POSTGRES_SERVER: Optional[str] = None
    POSTGRES_USER: Optional[str] = None
    POSTGRES_PASSWORD: Optional[str] = None
    POSTGRES_DB: Optional[str] = None
    POSTGRES_PORT: str = "5432"
    DATABASE_URL: Optional[str] = None
    DATABASE_POOL_SIZE: int = 5
    DATABASE_MAX_OVERFLOW: int = 10
    DEBUG: bool = False

    # Logging
    LOG_LEVEL: str = "INFO"

    # "legacy" lets an update move a prescription onto a slot that already
    # has one; "strict" rejects it with DuplicatePrescriptionError.
    PRESCRIPTION_UPDATE_POLICY: str = "legacy"

    @field_validator("PRESCRIPTION_UPDATE_POLICY", mode="before")
    @classmethod
    def check_update_policy(cls, v: str) -> str:
        v = str(v).strip().lower()
        if v not in UPDATE_POLICIES:
            raise ValueError(f"PRESCRIPTION_UPDATE_POLICY must be one of {UPDATE_POLICIES}, got {v!r}")
        return v

    @model_validator(mode='after')
    def assemble_db_connection(self) -> 'Settings':
        if not self.DATABASE_URL:
            if all([self.POSTGRES_USER, self.POSTGRES_PASSWORD, self.POSTGRES_SERVER, self.POSTGRES_DB]):
                self.DATABASE_URL = (
                    f"postgresql://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}@"
                    f"{self.POSTGRES_SERVER}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"
                )
            else:
                self.DATABASE_URL = "sqlite:///./vaidya.db"

        # Some cloud providers still hand out the pre-SQLAlchemy 1.4 scheme
        if self.DATABASE_URL.startswith("postgres://"):
            self.DATABASE_URL = self.DATABASE_URL.replace("postgres://", "postgresql://", 1)

        return self

    model_config = SettingsConfigDict(case_sensitive=True, env_file=".env", extra='ignore')

settings = Settings()
