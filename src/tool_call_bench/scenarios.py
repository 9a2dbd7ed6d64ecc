"""
Built-in Scenarios

Weather smoke test plus two mixing-console scenarios that grade the
recorded API calls against a checklist of expected writes.
"""

from __future__ import annotations

import logging

from tool_call_bench.domain.scenario import Scenario
from tool_call_bench.domain.value_objects import ApiCall
from tool_call_bench.tool_services import MockMixingConsoleService, MockWeatherService

logger = logging.getLogger(__name__)

MIXING_CONSOLE_SYSTEM_PROMPT = """\
- API uses 0-based indexing (ch.0, ch.1, ch.2...)
- Humans use 1-based indexing (Channel 1, Channel 2, Channel 3...)
- You must translate human/user requests from 1-based to 0-based.

Examples: Human "Channel 1" -> API ch.0 | Human "Channels 1-4" -> API ch.0-ch.3"""

WEATHER_SYSTEM_PROMPT = "You are a helpful assistant for the weather service."


def _name(channel: int, value: str) -> ApiCall:
    return ApiCall(f"ch.{channel}.cfg.name", value)


# (expected call, points)
SIMPLE_CHECKLIST: tuple[tuple[ApiCall, float], ...] = (
    (_name(0, "Kick"), 2.0),
    (_name(1, "Snare"), 2.0),
    (_name(0, "Kick-In"), 2.0),
    (_name(1, "Snare-Top"), 2.0),
    (_name(2, "Backup-Kick-In"), 2.0),
)

COMPLEX_CHECKLIST: tuple[tuple[ApiCall, float], ...] = (
    # drum setup
    (_name(0, "Kick"), 1.0),
    (_name(1, "Snare"), 1.0),
    (_name(2, "Hi-hat"), 1.0),
    (_name(3, "Tom 1"), 1.0),
    (_name(4, "Tom 2"), 1.0),
    (_name(5, "Overheads L"), 1.0),
    (_name(6, "Overheads R"), 1.0),
    # bass and guitar
    (_name(7, "bass"), 1.0),
    (_name(8, "guitar"), 1.0),
    # swap
    (_name(5, "guitar"), 1.0),
    (_name(8, "Overheads R"), 1.0),
    # vocals
    (_name(11, "lead vocal"), 1.0),
    (_name(12, "backing vocals"), 1.0),
    (_name(13, "backing vocals"), 1.0),
    # DR- prefix
    (_name(0, "DR-Kick"), 1.0),
    (_name(1, "DR-Snare"), 1.0),
    (_name(2, "DR-Hi-hat"), 1.0),
    (_name(3, "DR-Tom 1"), 1.0),
    (_name(4, "DR-Tom 2"), 1.0),
    (_name(5, "DR-Overheads L"), 1.0),
    (_name(8, "DR-Overheads R"), 1.0),
    # specific kick rename
    (_name(0, "DR-Kick-In"), 1.0),
)


def score_checklist(
    calls: list[ApiCall],
    checklist: tuple[tuple[ApiCall, float], ...],
) -> float:
    """
    Grade recorded calls against a checklist.

    Each expected call earns its points once if it appears anywhere in
    ``calls``, regardless of order.

    Returns:
        float: Earned points / total points, in [0, 1]
    """
    max_score = sum(points for _, points in checklist)
    if max_score == 0:
        return 0.0
    score = sum(points for expected, points in checklist if expected in calls)
    return score / max_score


def create_weather_smoke_scenario(service: MockWeatherService | None = None) -> Scenario:
    """Single prompt; passes if the weather tool was called at all"""
    service = service if service is not None else MockWeatherService()

    def validate() -> float:
        return 1.0 if service.get_total_call_count() > 0 else 0.0

    return Scenario(
        name="Weather Service Smoke Test",
        prompts=("What's the weather in Tokyo?",),
        tool_service=service,
        validate=validate,
        system_prompt=WEATHER_SYSTEM_PROMPT,
    )


def create_simple_scenario(service: MockMixingConsoleService | None = None) -> Scenario:
    """Channel renaming that relies on conversation memory"""
    service = service if service is not None else MockMixingConsoleService()

    def validate() -> float:
        calls = service.get_captured_api_calls()
        logger.debug("Simple validation - Captured calls: %s", [str(c) for c in calls])
        score = score_checklist(calls, SIMPLE_CHECKLIST)
        logger.info("Simple validation score: %.2f", score)
        return score

    return Scenario(
        name="Simple Channel Renaming with Memory",
        prompts=(
            "Rename channel 1 to Kick and channel 2 to Snare",
            "What did you just name channel 1?",
            "Now change the first channel you renamed to Kick-In and the second to Snare-Top",
            "Rename channel 3 to the same as channel 1 but with 'Backup-' prefix",
        ),
        tool_service=service,
        validate=validate,
        system_prompt=MIXING_CONSOLE_SYSTEM_PROMPT,
    )


def create_complex_scenario(service: MockMixingConsoleService | None = None) -> Scenario:
    """Full band setup with reads, a swap, and bulk renames"""
    service = service if service is not None else MockMixingConsoleService()

    def validate() -> float:
        calls = service.get_captured_api_calls()
        logger.debug("Complex validation - Total calls made: %d", len(calls))
        score = score_checklist(calls, COMPLEX_CHECKLIST)
        logger.info("Complex validation score: %.2f", score)
        return score

    return Scenario(
        name="Complex Band Setup with Memory",
        prompts=(
            "Name channels 1-7: Kick, Snare, Hi-hat, Tom 1, Tom 2, Overheads L, Overheads R",
            "Add bass on channel 8 and guitar on channel 9",
            "What's on channel 6? Now swap it with what's on channel 9",
            "Add lead vocal on channel 12, backing vocals on 13-14",
            "Change all drum channels (the first 7 you set up) to have 'DR-' prefix",
            "Rename the Kick channel specifically to 'DR-Kick-In'",
        ),
        tool_service=service,
        validate=validate,
        system_prompt=MIXING_CONSOLE_SYSTEM_PROMPT,
    )


def create_master_scenarios() -> list[Scenario]:
    """Scenarios run by the master benchmark, in order"""
    return [create_simple_scenario(), create_complex_scenario()]
