from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

Tier = Literal["majority", "common", "uncommon", "rare", "unique"]


class ApiModel(BaseModel):
    """Snake_case in Python, camelCase on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ---------------------------------------------------------------------------
# Scoring / aggregation shapes
# ---------------------------------------------------------------------------


class ConsensusScore(ApiModel):
    points_earned: int
    match_percentage: float
    tier: Tier


class RankedEntry(ApiModel):
    guess: str
    count: int
    percentage: float
    is_player_guess: bool = False
    is_creator_answer: bool = False
    rank: int = 0
    variants: list[str] | None = None  # non-primary spellings; None for single-member groups


class ConsensusResults(ApiModel):
    type: Literal["consensus-results"] = "consensus-results"
    aggregation: list[RankedEntry]
    player_guess: str | None = None
    creator_answer: str
    total_players: int
    total_guesses: int
    player_score: ConsensusScore
    creator_answer_data: RankedEntry | None = None  # set only when the answer missed the top N
    partial: bool = False


class FinalSnapshot(ApiModel):
    guesses: dict[str, int]
    total_players: int
    total_guesses: int


class HistoricalResults(ApiModel):
    type: Literal["historical-results"] = "historical-results"
    aggregation: list[RankedEntry]
    creator_answer: str
    total_players: int
    total_guesses: int
    is_final: Literal[True] = True
    prompt_text: str


# ---------------------------------------------------------------------------
# Prompts
# ---------------------------------------------------------------------------


class CustomPrompt(ApiModel):
    post_id: str
    description: str
    answer: str
    created_by: str
    created_at: int  # epoch ms


# ---------------------------------------------------------------------------
# Preset-prompt game
# ---------------------------------------------------------------------------

Difficulty = Literal["easy", "medium", "hard"]


class PresetPrompt(ApiModel):
    id: int
    prompt_text: str
    answer: str
    alternative_answers: list[str] = Field(default_factory=list)
    difficulty: Difficulty
    category: str


class PresetPromptView(ApiModel):
    """A preset prompt as shown to the player, without its answers."""

    id: int
    prompt_text: str
    difficulty: Difficulty
    category: str


class AnswerCheck(ApiModel):
    is_correct: bool
    is_close: bool
    points_earned: int


# ---------------------------------------------------------------------------
# HTTP request / response bodies
# ---------------------------------------------------------------------------


class CreatePromptRequest(ApiModel):
    description: str = Field(min_length=1)
    answer: str = Field(min_length=1)
    created_by: str = Field(min_length=1)


class PromptView(ApiModel):
    post_id: str
    description: str
    has_guessed: bool


class GuessRequest(ApiModel):
    username: str = Field(min_length=1)
    guess: str


class GuessSubmittedResponse(ApiModel):
    type: Literal["guess-submitted"] = "guess-submitted"
    success: bool
    message: str


class CloseResponse(ApiModel):
    closed: bool
    total_players: int = 0
    total_guesses: int = 0


class GameStartRequest(ApiModel):
    username: str = "anonymous"


class GameStartResponse(ApiModel):
    type: Literal["game-start"] = "game-start"
    session_id: str
    username: str


class NextPromptRequest(ApiModel):
    session_id: str = Field(min_length=1)


class NextPromptResponse(ApiModel):
    type: Literal["next-prompt"] = "next-prompt"
    prompt: PresetPromptView


class AnswerRequest(ApiModel):
    session_id: str = Field(min_length=1)
    prompt_id: int
    guess: str


class GuessResultResponse(ApiModel):
    type: Literal["guess-result"] = "guess-result"
    is_correct: bool
    is_close: bool
    correct_answer: str
    points_earned: int
    total_score: int
    rounds_completed: int
