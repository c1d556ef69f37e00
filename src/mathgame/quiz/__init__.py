from ._main import build_arg_parser
from .problems import OPERAND_MAX, OPERAND_MIN, Problem, generate_problems
from .session import (
    WRONG_ANSWER_SENTINEL,
    AnswerRecord,
    QuizSession,
    Screen,
    SessionStateError,
    SessionStatus,
    answer,
    cancel,
    current_problem,
    parse_answer,
    parse_count,
    read_answer,
    reduce,
    restart,
    start,
    view,
)
from .console import GameResult, run_game
from .app import MathGameApp, QuestionView, ResultView, StartView

__all__ = [
    "build_arg_parser",
    "OPERAND_MIN",
    "OPERAND_MAX",
    "Problem",
    "generate_problems",
    "WRONG_ANSWER_SENTINEL",
    "AnswerRecord",
    "QuizSession",
    "Screen",
    "SessionStateError",
    "SessionStatus",
    "answer",
    "cancel",
    "current_problem",
    "parse_answer",
    "read_answer",
    "parse_count",
    "reduce",
    "restart",
    "start",
    "view",
    "GameResult",
    "run_game",
    "MathGameApp",
    "QuestionView",
    "ResultView",
    "StartView",
]
