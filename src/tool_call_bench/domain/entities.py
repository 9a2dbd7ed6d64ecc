"""
Domain Entities

Defines the primary data structures produced while a benchmark runs.
"""

from dataclasses import dataclass, field


@dataclass
class RunOutcome:
    """Result of a single trial (one pass over a scenario's prompts)"""
    execution_time_ms: int = 0
    success: bool = False
    error: str | None = None
    prompt_tokens: int = 0
    completion_tokens: int = 0
    cost: float = 0.0
    tool_calls_made: int = 0
    accuracy_score: float = 0.0
    timed_out: bool = False

    @property
    def total_tokens(self) -> int:
        return self.prompt_tokens + self.completion_tokens


@dataclass
class ModelResults:
    """
    All trial outcomes for one model within one scenario

    Statistics are derived from ``runs`` on every call; nothing is cached.
    """
    model_name: str
    runs: list[RunOutcome] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)  # distinct, first-seen order

    def add_run(self, run: RunOutcome) -> None:
        self.runs.append(run)
        if run.error is not None and run.error not in self.errors:
            self.errors.append(run.error)

    def get_success_rate(self) -> float:
        if not self.runs:
            return 0.0
        return sum(1 for r in self.runs if r.success) / len(self.runs)

    def get_average_accuracy(self) -> float:
        """Mean accuracy over successful runs only"""
        scores = [r.accuracy_score for r in self.runs if r.success]
        return sum(scores) / len(scores) if scores else 0.0

    def get_average_time(self) -> float:
        return self._mean([r.execution_time_ms for r in self.runs])

    def get_average_cost(self) -> float:
        return self._mean([r.cost for r in self.runs])

    def get_average_tokens(self) -> float:
        return self._mean([r.total_tokens for r in self.runs])

    def get_average_tool_calls(self) -> float:
        return self._mean([r.tool_calls_made for r in self.runs])

    @staticmethod
    def _mean(values: list[float]) -> float:
        return sum(values) / len(values) if values else 0.0


@dataclass
class BenchmarkResults:
    """Per-scenario results keyed by full model name (insertion ordered)"""
    scenario_name: str
    results: dict[str, ModelResults] = field(default_factory=dict)

    def add_result(self, model_name: str, model_results: ModelResults) -> None:
        self.results[model_name] = model_results


@dataclass
class ScoreBreakdown:
    """Composite score of one viable model (max 100)"""
    model_name: str
    reliability: float
    accuracy: float
    speed: float
    cost: float

    @property
    def total(self) -> float:
        return self.reliability + self.accuracy + self.speed + self.cost


@dataclass
class WinnerReport:
    """Winner determination for one scenario"""
    scenario_name: str
    winner: str | None
    scores: list[ScoreBreakdown]          # viable models, highest total first
    disqualified: list[str]               # 0% success, insertion order
    failure_modes: list[ModelResults] = field(default_factory=list)  # only when no winner, by average time


@dataclass
class MasterReport:
    """Results across several scenarios"""
    scenario_results: list[BenchmarkResults]
    winner_reports: list[WinnerReport]
    overall_scores: dict[str, float]      # summed per-scenario scores, highest first
    overall_winner: str | None


@dataclass
class HealthCheckResult:
    """Provider configuration check result"""
    provider_name: str
    success: bool
    error: str | None
