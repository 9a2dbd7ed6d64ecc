"""
Benchmark Harness Configuration

Manages loading from environment variables (optionally seeded from a .env file)
and default values.
"""

import os
from dataclasses import dataclass, field, asdict

from dotenv import load_dotenv

from tool_call_bench.domain.constants import (
    DEFAULT_ITERATIONS,
    DEFAULT_TIMEOUT_SECONDS,
    INITIAL_BACKOFF_MS,
    MAX_RETRIES,
    RATE_LIMIT_DELAY_SECONDS,
)


def _env_int(key: str, default: int) -> int:
    """Convert an environment variable to int"""
    val = os.environ.get(key)
    if val is None:
        return default
    try:
        return int(val)
    except ValueError:
        raise ValueError(f"The value '{val}' of environment variable '{key}' cannot be converted to an integer.")


def _env_float(key: str, default: float) -> float:
    """Convert an environment variable to float"""
    val = os.environ.get(key)
    if val is None:
        return default
    try:
        return float(val)
    except ValueError:
        raise ValueError(f"The value '{val}' of environment variable '{key}' cannot be converted to a number.")


def _env_str(key: str, default: str) -> str:
    """Get an environment variable as a string"""
    return os.environ.get(key, default)


@dataclass
class RunConfig:
    """Trial repetition and deadline"""
    iterations: int = DEFAULT_ITERATIONS
    timeout_seconds: int = DEFAULT_TIMEOUT_SECONDS

    def __post_init__(self):
        if self.iterations < 1:
            raise ValueError("iterations must be at least 1.")
        if self.timeout_seconds <= 0:
            raise ValueError("timeout_seconds must be positive.")


@dataclass
class RetryConfig:
    """Rate-limit retry configuration"""
    max_retries: int = MAX_RETRIES
    initial_backoff_ms: int = INITIAL_BACKOFF_MS

    def __post_init__(self):
        if self.max_retries < 1:
            raise ValueError("max_retries must be at least 1.")


@dataclass
class PacingConfig:
    """Delay between iterations to stay under provider request quotas"""
    iteration_delay_seconds: float = float(RATE_LIMIT_DELAY_SECONDS)


@dataclass
class ModelConfig:
    """Sampling and tool-loop settings shared by every provider session"""
    temperature: float = 0.1
    max_tokens: int = 2048
    max_tool_rounds: int = 10


@dataclass
class OllamaConfig:
    """Ollama (local runtime, OpenAI-compatible endpoint) configuration"""
    base_url: str = "http://localhost:11434/v1"


@dataclass
class HarnessConfig:
    """Overall benchmark harness configuration"""
    run: RunConfig = field(default_factory=RunConfig)
    retry: RetryConfig = field(default_factory=RetryConfig)
    pacing: PacingConfig = field(default_factory=PacingConfig)
    model: ModelConfig = field(default_factory=ModelConfig)
    ollama: OllamaConfig = field(default_factory=OllamaConfig)

    def to_dict(self) -> dict:
        """Convert to dictionary format"""
        return {"harness_config": asdict(self)}

    @classmethod
    def from_dict(cls, data: dict) -> "HarnessConfig":
        """Create from dictionary (handles presence/absence of harness_config key)"""
        config_data = data.get("harness_config", data)
        return cls(
            run=RunConfig(**config_data.get("run", {})),
            retry=RetryConfig(**config_data.get("retry", {})),
            pacing=PacingConfig(**config_data.get("pacing", {})),
            model=ModelConfig(**config_data.get("model", {})),
            ollama=OllamaConfig(**config_data.get("ollama", {})),
        )


def load_config(env_file: str | os.PathLike | None = None) -> HarnessConfig:
    """
    Load configuration from environment variables

    Uses default values when environment variables are not set. When env_file
    is given, its variables are loaded first without overriding ones already
    present in the process environment.

    Args:
        env_file: Optional path to a .env file

    Returns:
        HarnessConfig
    """
    if env_file is not None:
        load_dotenv(env_file, override=False)

    run = RunConfig(
        iterations=_env_int("BENCH_ITERATIONS", DEFAULT_ITERATIONS),
        timeout_seconds=_env_int("BENCH_TIMEOUT_SECONDS", DEFAULT_TIMEOUT_SECONDS),
    )
    retry = RetryConfig(
        max_retries=_env_int("BENCH_MAX_RETRIES", MAX_RETRIES),
        initial_backoff_ms=_env_int("BENCH_INITIAL_BACKOFF_MS", INITIAL_BACKOFF_MS),
    )
    pacing = PacingConfig(
        iteration_delay_seconds=_env_float("BENCH_ITERATION_DELAY_SECONDS", float(RATE_LIMIT_DELAY_SECONDS)),
    )
    model = ModelConfig(
        temperature=_env_float("BENCH_TEMPERATURE", 0.1),
        max_tokens=_env_int("BENCH_MAX_TOKENS", 2048),
        max_tool_rounds=_env_int("BENCH_MAX_TOOL_ROUNDS", 10),
    )
    ollama = OllamaConfig(
        base_url=_env_str("OLLAMA_BASE_URL", "http://localhost:11434/v1"),
    )
    return HarnessConfig(run=run, retry=retry, pacing=pacing, model=model, ollama=ollama)
