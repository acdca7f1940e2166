from __future__ import annotations

import os
from pathlib import Path
from typing import List


class Settings:
    """Centralized configuration for the body tracker app and client core."""

    def __init__(self) -> None:
        base_dir = Path(__file__).resolve().parent
        repo_root = base_dir.parent
        data_root_default = repo_root / "data"

        self.data_root: Path = Path(
            os.environ.get("BODYTRACKER_DATA_ROOT") or data_root_default
        ).expanduser()
        self.app_db_path: Path = Path(
            os.environ.get("BODYTRACKER_DB_PATH") or (self.data_root / "bodytracker.db")
        ).expanduser()
        # No auth protocol: requests carry a plain user id, this one is used when absent.
        self.default_user_id: str = os.environ.get("BODYTRACKER_DEFAULT_USER") or "local"

        # Python weekday numbering (Monday=0 .. Sunday=6).
        self.week_start: int = int(os.environ.get("BODYTRACKER_WEEK_START") or "6") % 7
        self.undo_grace_seconds: float = float(
            os.environ.get("BODYTRACKER_UNDO_GRACE_SECONDS") or "5"
        )
        self.swipe_edit_threshold: float = float(os.environ.get("BODYTRACKER_SWIPE_EDIT") or "80")
        self.swipe_delete_threshold: float = float(os.environ.get("BODYTRACKER_SWIPE_DELETE") or "160")
        self.swipe_max: float = float(os.environ.get("BODYTRACKER_SWIPE_MAX") or "200")

        # ---- LLM (calorie estimate / insights), OpenAI-compatible chat completions ----
        self.llm_api_key: str | None = os.environ.get("LLM_API_KEY")
        self.llm_base_url: str = os.environ.get(
            "LLM_BASE_URL", "https://dashscope.aliyuncs.com/compatible-mode/v1"
        )
        self.llm_model: str = os.environ.get("LLM_MODEL", "qwen-plus")
        self.llm_timeout: float = float(os.environ.get("LLM_TIMEOUT", "30"))
        self.llm_max_tokens: int = int(os.environ.get("LLM_MAX_TOKENS", "512"))
        self.llm_temperature: float = float(os.environ.get("LLM_TEMPERATURE", "0.2"))

        cors = os.environ.get("BODYTRACKER_CORS_ORIGINS", "*")
        if cors.strip() == "*":
            self.cors_origins: List[str] = ["*"]
        else:
            self.cors_origins = [
                origin.strip() for origin in cors.split(",") if origin.strip()
            ]


settings = Settings()
