"""Application configuration, read from environment variables"""
import os
from dataclasses import dataclass

from domain.repositories import ReservationStore

STORE_BACKENDS = ("memory", "json", "remote")


@dataclass
class Settings:
    """Application settings"""
    # Storage
    STORE_BACKEND: str = os.getenv('STORE_BACKEND', 'memory')
    STORE_PATH: str = os.getenv('STORE_PATH', 'data/reservations.json')
    REMOTE_URL: str = os.getenv('REMOTE_URL', '')
    REMOTE_TIMEOUT_SECONDS: float = float(os.getenv('REMOTE_TIMEOUT_SECONDS', '10'))

    # Auth (mock login, tokens only carry the chosen email and role)
    SECRET_KEY: str = os.getenv('SECRET_KEY', 'change-me-in-production')
    ALGORITHM: str = os.getenv('ALGORITHM', 'HS256')
    ACCESS_TOKEN_EXPIRE_MINUTES: int = int(os.getenv('ACCESS_TOKEN_EXPIRE_MINUTES', '480'))

    # Logging
    LOG_LEVEL: str = os.getenv('LOG_LEVEL', 'INFO')

    def __post_init__(self):
        self.STORE_BACKEND = self.STORE_BACKEND.lower()
        if self.STORE_BACKEND not in STORE_BACKENDS:
            raise ValueError(
                f"STORE_BACKEND must be one of {', '.join(STORE_BACKENDS)}, got {self.STORE_BACKEND!r}"
            )
        if self.STORE_BACKEND == 'remote' and not self.REMOTE_URL:
            raise ValueError("REMOTE_URL is required for the remote store")
        if self.REMOTE_TIMEOUT_SECONDS <= 0:
            raise ValueError("REMOTE_TIMEOUT_SECONDS must be positive")


def build_store(settings: Settings) -> ReservationStore:
    """Instantiate the configured reservation store"""
    if settings.STORE_BACKEND == 'json':
        from infrastructure.repositories.json_file_repository import JsonFileReservationStore
        return JsonFileReservationStore(settings.STORE_PATH)
    if settings.STORE_BACKEND == 'remote':
        from infrastructure.repositories.remote_repository import RemoteReservationStore
        return RemoteReservationStore(settings.REMOTE_URL, timeout=settings.REMOTE_TIMEOUT_SECONDS)

    from infrastructure.repositories.in_memory_repositories import InMemoryReservationStore
    return InMemoryReservationStore()


settings = Settings()
