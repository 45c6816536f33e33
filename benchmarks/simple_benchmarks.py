from timeit import timeit

from unilisp.interpreter import Interpreter
from unilisp.types.environment import Environment


def time_evaluator(code: str, rounds: int) -> float:
    """Time the evaluator alone: read and expand once, then repeatedly evaluate
    the expanded form in the global environment.
    """
    itp = Interpreter()
    expr = itp.parse(code)
    # Warmup
    itp.evaluator.evaluate(expr, itp.global_env)
    # Timed
    return timeit(lambda: itp.evaluator.evaluate(expr, itp.global_env), number=rounds)


def time_parse(code: str, rounds: int) -> float:
    """Time reading plus macro expansion of `code` (no evaluation)."""
    itp = Interpreter()
    itp.parse(code)
    return timeit(lambda: itp.parse(code), number=rounds)


# Environment lookup chain (does not involve the evaluator)

def bench_lookup_chain(n_envs: int = 1000, n_lookups: int = 10000) -> float:
    # Build an environment chain with a binding at the root
    root = Environment()
    root.define("answer", 42)
    env = root
    for _ in range(n_envs):
        env = Environment(outer=env)
    # Warmup
    for _ in range(1000):
        env.lookup("answer")
    # Timed
    return timeit(lambda: env.lookup("answer"), number=n_lookups)


LAMBDA_APPLY_CODE = "((lambda (x y) (+ x y)) 1 2)"

TAIL_RECURSION_CODE = r"""
(begin
  (define (fact n acc)
    (if (<= n 1)
        acc
        (fact (- n 1) (* n acc))))
  (fact 30 1))
"""

# Sum 1..N with while and set!
WHILE_SUM_CODE = r"""
(begin
  (define i 0)
  (define acc 0)
  (while (< i 500)
    (set! i (+ i 1))
    (set! acc (+ acc i)))
  acc)
"""

# Native interop: math.sqrt resolved through the marked symbol
MATH_SQRT_CODE = r"""
(begin
  (define (sqrt-acc n acc)
    (if (<= n 0)
        acc
        (sqrt-acc (- n 1) (+ acc (#math.sqrt n)))))
  (sqrt-acc 200 0))
"""

QUASIQUOTE_CODE = "(let ((a 1) (b '(2 3))) `(0 ,a ,@b (4 ,(if a b #f))))"


def _print(name: str, code: str, rounds: int) -> None:
    teval = time_evaluator(code, rounds)
    tparse = time_parse(code, rounds)
    print(f"Benchmark: {name}")
    print(f"  evaluate: {teval:.6f}s  |  read+expand: {tparse:.6f}s  [rounds={rounds}]")


if __name__ == "__main__":
    print("Benchmark: environment lookup chain (pure Python env lookup)")
    print(f"  time: {bench_lookup_chain():.6f}s")

    _print("lambda application", LAMBDA_APPLY_CODE, rounds=20000)
    _print("tail recursion (factorial)", TAIL_RECURSION_CODE, rounds=500)
    _print("while loop sum 1..500", WHILE_SUM_CODE, rounds=200)
    _print("native interop: math.sqrt loop", MATH_SQRT_CODE, rounds=200)
    _print("quasiquote and let", QUASIQUOTE_CODE, rounds=5000)
