"""
Domain Constants

Centrally manages constants shared across the benchmark engine.
"""

# Attempts per iteration when a run fails with a rate-limit error
MAX_RETRIES = 3

# First backoff pause between rate-limited attempts (doubles after each retry)
INITIAL_BACKOFF_MS = 1000

# Pause between iterations of the same model
RATE_LIMIT_DELAY_SECONDS = 10

DEFAULT_ITERATIONS = 5
DEFAULT_TIMEOUT_SECONDS = 60 * 3

# Substrings in provider error messages that indicate rate limiting
RATE_LIMIT_MARKERS = (
    "rate_limit_exceeded",
    "429",
    "Too Many Requests",
)

# Composite score weights (max 100)
RELIABILITY_WEIGHT = 50.0
ACCURACY_WEIGHT = 30.0
SPEED_SCORE_CAP = 15.0
SPEED_REFERENCE_MS = 15000.0
COST_SCORE_CAP = 5.0
COST_REFERENCE_USD = 0.05

# Model pricing keyed by full model name (USD / 1M tokens, tokens/sec estimate)
MODEL_PRICING = {
    "groq/llama-3.1-8b-instant": {"input": 0.05, "output": 0.08, "tool_calling": True, "tps": 840},
    "groq/llama-3-8b-tool-use-preview": {"input": 0.05, "output": 0.08, "tool_calling": True, "tps": 1345},
    "groq/llama-4-scout-preview": {"input": 0.11, "output": 0.34, "tool_calling": True, "tps": 594},
    "groq/llama-3.3-70b-versatile": {"input": 0.59, "output": 0.79, "tool_calling": True, "tps": 394},
    "groq/qwen3-32b-preview": {"input": 0.29, "output": 0.59, "tool_calling": True, "tps": 662},
    "deepseek/deepseek-chat": {"input": 0.27, "output": 1.10, "tool_calling": True, "tps": 60},
    "google/gemini-2.0-flash": {"input": 0.10, "output": 0.40, "tool_calling": True, "tps": 250},
    "google/gemini-2.0-flash-lite": {"input": 0.075, "output": 0.30, "tool_calling": True, "tps": 300},
    "openai/gpt-4o-mini": {"input": 0.15, "output": 0.60, "tool_calling": True, "tps": 80},
    "openai/gpt-4.1-nano": {"input": 0.10, "output": 0.40, "tool_calling": True, "tps": 120},
    "anthropic/claude-haiku-4-5-20251001": {"input": 0.80, "output": 4.0, "tool_calling": True, "tps": 90},
}

# Default pricing for local models (Ollama, etc.)
_LOCAL_MODEL_PRICING = {"input": 0.0, "output": 0.0, "tool_calling": True}
