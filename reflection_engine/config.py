"""Configuration settings for reflection-engine."""

# Load .env into os.environ before settings are read
from dotenv import load_dotenv

load_dotenv()

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Global settings for reflection-engine.

    Settings can be overridden via environment variables with the
    REFLECTION_ENGINE_ prefix. List values are given as JSON, e.g.
    REFLECTION_ENGINE_QUARTER_LABELS='["Q1","Q2","Q3","Q4"]'
    """

    # Sorting
    quarter_labels: list[str] = Field(
        default=["Q1", "Q2", "Q3", "Q4"],
        description="Quarter labels in calendar order; ranked 1..n when sorting",
    )
    date_fields: list[str] = Field(
        default=[
            "deadline",
            "timeline",
            "createdAt",
            "created_at",
            "updated_at",
            "assigned_at",
            "submitted_at",
            "completed_at",
        ],
        description="Fields compared as calendar timestamps when sorting",
    )

    # CSV exports
    numeric_fields: list[str] = Field(
        default=["progress_percent", "year"],
        description="CSV columns converted to int when loading exports",
    )

    # Analytics
    high_risk_overdue_threshold: int = Field(
        default=2,
        ge=0,
        description="Overdue focus areas above this count rate as HIGH risk",
    )

    # Runtime
    log_level: str = Field(
        default="INFO",
        description="Logging level used by the command-line tools",
    )
    sample_data_path: str = Field(
        default="examples/sample_focus_areas.json",
        description="Demo dataset used by the example script and Streamlit view",
    )

    model_config = {
        "env_prefix": "REFLECTION_ENGINE_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }

    def quarter_rank(self, label) -> int:
        """Return the 1-based calendar rank of a quarter label, 0 if unknown."""
        try:
            return self.quarter_labels.index(label) + 1
        except ValueError:
            return 0


settings = Settings()
