"""Configuration module for dirstat."""

from dataclasses import dataclass, field
from pathlib import Path

DEFAULT_LONG_PATH_THRESHOLD = 260


class ConfigError(Exception):
    """Raised when options are missing or cannot be combined."""


@dataclass
class ScannerConfig:
    long_path_threshold: int = DEFAULT_LONG_PATH_THRESHOLD
    analyze_age: bool = True
    analyze_extensions: bool = True
    extensions_for_matches_only: bool = False
    progress_interval: int = 10000

    def validate(self) -> None:
        if self.long_path_threshold < 1:
            raise ConfigError(
                f"Long path threshold must be at least 1, got {self.long_path_threshold}"
            )
        if self.extensions_for_matches_only and not self.analyze_extensions:
            raise ConfigError("Parameters --no-ext and --pattern-ext cannot be used together")
        if self.progress_interval < 1:
            raise ConfigError(f"Progress interval must be at least 1, got {self.progress_interval}")


@dataclass
class Config:
    output_path: Path = Path("data.json")
    format_json: bool = False
    workers: int = 1
    scanner: ScannerConfig = field(default_factory=ScannerConfig)

    def validate(self) -> None:
        self.scanner.validate()
        if self.workers < 1:
            raise ConfigError(f"Number of workers must be at least 1, got {self.workers}")
