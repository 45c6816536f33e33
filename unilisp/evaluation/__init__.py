from unilisp.evaluation.evaluator import Evaluator
from unilisp.evaluation.apply import apply, bind_arguments

__all__ = ["Evaluator", "apply", "bind_arguments"]
