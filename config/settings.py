#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Settings - Centralized configuration management
"""

from pathlib import Path
from pydantic import field_validator
from pydantic_settings import BaseSettings


# Base directory
BASE_DIR = Path(__file__).resolve().parent.parent


class Settings(BaseSettings):
    """Application settings"""

    # ========== Vocabulary Store ==========
    vocabulary_db_path: Path = BASE_DIR / "data" / "vocabulary.db"
    vocabulary_schema_name: str = "vocabularyItem"  # Only items of this type are linked

    # ========== Annotation ==========
    annotation_key_length: int = 12  # Length of generated _key values
    # Off: "cat" also matches inside "concatenate". On: only at word starts.
    vocabulary_match_word_start: bool = False

    # ========== Logging ==========
    log_level: str = "INFO"

    class Config:
        env_file = str(BASE_DIR / ".env")
        env_file_encoding = "utf-8"
        case_sensitive = False
        extra = "ignore"  # Allow extra fields from .env that aren't defined in model

    @field_validator("annotation_key_length")
    @classmethod
    def validate_key_length(cls, v):
        if not 8 <= v <= 32:
            raise ValueError("annotation_key_length must be between 8 and 32")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v):
        level = v.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Unknown log level: {v}")
        return level

    def print_config(self):
        """Print configuration summary"""
        print("\n" + "="*70)
        print("CONFIGURATION")
        print("="*70)
        print(f"Vocabulary DB:   {self.vocabulary_db_path}")
        print(f"Schema Name:     {self.vocabulary_schema_name}")
        print(f"Key Length:      {self.annotation_key_length}")
        print(f"Word Start Only: {self.vocabulary_match_word_start}")
        print(f"Log Level:       {self.log_level}")
        print("="*70 + "\n")


# Global settings instance
settings = Settings()
