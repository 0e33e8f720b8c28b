import os
from functools import lru_cache
from typing import Dict, List, Mapping, Optional

from pydantic import BaseModel, Field

from gigboard.models.schemas import Freelancer

# Settings field -> environment variable
ENV_VARS: Dict[str, str] = {
    "environment": "GIGBOARD_ENV",
    "storage_backend": "GIGBOARD_STORAGE",
    "storage_key": "GIGBOARD_STORAGE_KEY",
    "data_dir": "GIGBOARD_DATA_DIR",
    "public_url": "GIGBOARD_PUBLIC_URL",
    "currency": "GIGBOARD_CURRENCY",
    "stripe_secret_key": "STRIPE_SECRET_KEY",
    "firebase_credentials": "FIREBASE_CREDENTIALS",
    "firebase_project_id": "FIREBASE_PROJECT_ID",
}

def default_freelancers() -> List[Freelancer]:
    return [Freelancer(id="current-freelancer-id", name="John Doe")]

class Settings(BaseModel):
    environment: str = "development" # 'development' exposes stack traces in payment errors
    storage_backend: str = "file" # 'file', 'firestore' or 'memory'
    storage_key: str = "project-store"
    data_dir: str = "data"
    public_url: str = "http://localhost:3000" # used when a request carries no Origin header
    currency: str = "inr"
    stripe_secret_key: Optional[str] = None
    firebase_credentials: Optional[str] = "service-account-key.json"
    firebase_project_id: Optional[str] = None
    initial_freelancers: List[Freelancer] = Field(default_factory=default_freelancers)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """Build settings from environment variables, keeping defaults for unset or empty ones."""
        env = os.environ if environ is None else environ
        values = {field: env[var] for field, var in ENV_VARS.items() if env.get(var)}
        return cls(**values)

@lru_cache()
def get_settings() -> Settings:
    return Settings.from_env()
