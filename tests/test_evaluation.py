import pytest

from unilisp.errors import LispRuntimeError, LispSyntaxError
from unilisp.interpreter import Interpreter
from unilisp.printer import stringify
from unilisp.types.nil import Nil
from unilisp.types.procedure import Procedure


@pytest.mark.parametrize(
    "code,expected",
    [
        ("42", "42"),
        ('"hello"', '"hello"'),
        ("#f", "#f"),
        ("nil", "nil"),
        ("'ping", "ping"),
        ("'(1 2 3)", "(1 2 3)"),
        ("(set! x 45)", "nil"),
        ("(define x 45)", "nil"),
        ("(begin (set! x 45) x)", "45"),
        ("(begin (define x 45) (set! x 46) x)", "46"),
        ("(if #t 1 2)", "1"),
        ("(if #f 1 2)", "2"),
        ("(if #f 1)", "nil"),
        ("(if '() 1 2)", "2"),
        ('(if "" 1 2)', "2"),
        ("(if 0 1 2)", "2"),
        ("(if nil 1 2)", "2"),
        ("(if 'sym 1 2)", "1"),
        ("(if car 1 2)", "1"),
        ("((lambda (x y) (+ x y)) 1 2)", "3"),
        ("((lambda args args) 1 2 3)", "(1 2 3)"),
        ("((lambda args args))", "()"),
        ("(begin (define (twice x) (* 2 x)) (twice 34))", "68"),
        ("(begin (define fib (lambda (n) (if (<= 2 n) (+ (fib (- n 1)) (fib (- n 2))) n))) (fib 10))", "55"),
        ("(begin (begin (define v 34) (set! v (+ v 8))) v)", "42"),
        ("(let ((x 8) (y 34)) (+ x y))", "42"),
        ("(let ((x 45)) (+ x x))", "90"),
        ("(and 1 #f)", "#f"),
        ("(and 1 2)", "2"),
        ("(and)", "#t"),
    ]
)
def test_eval(run, code, expected):
    assert run(code) == expected


@pytest.mark.parametrize(
    "code",
    [
        "unknownSymbol",
        "(1 2 3)",
        '("f" 1)',
        "((lambda (x y) x) 1)",
        "((lambda (x) x) 1 2)",
        "(car '())",
    ]
)
def test_eval_errors(interp, code):
    with pytest.raises(LispRuntimeError):
        interp.eval(code)


def test_syntax_errors_surface_from_eval(interp):
    with pytest.raises(LispSyntaxError):
        interp.eval(")")
    with pytest.raises(LispSyntaxError):
        interp.eval("(if 1 2 3 4)")


def test_lambda_evaluates_to_closure(interp):
    proc = interp.eval("(lambda (a b) (+ a b))")
    assert isinstance(proc, Procedure)
    assert not proc.is_primitive
    assert proc.env is interp.global_env
    assert stringify(proc) == "#<lambda (a b)>"


def test_closures_capture_defining_scope(run):
    run("""(define make-counter
             (lambda ()
               (let ((n 0))
                 (lambda () (set! n (+ n 1)) n))))""")
    run("(define c1 (make-counter))")
    run("(define c2 (make-counter))")
    assert run("(c1)") == "1"
    assert run("(c1)") == "2"
    assert run("(c2)") == "1"


def test_inner_define_shadows_without_touching_outer(run):
    run("(define x 1)")
    run("(define (f) (begin (define x 2) x))")
    assert run("(f)") == "2"
    assert run("x") == "1"


def test_first_class_procedures(run):
    run("(define (compose f g) (lambda (x) (f (g x))))")
    run("(define (inc x) (+ x 1))")
    assert run("((compose inc inc) 40)") == "42"
    assert run("((if #t + -) 1 2)") == "3"


def test_eval_accepts_expanded_values(interp):
    expr = interp.parse("(+ 40 2)")
    assert stringify(interp.eval(expr)) == "42"


def test_eval_in_explicit_environment(interp):
    from unilisp.types.environment import Environment

    env = Environment(interp.global_env)
    env.define("x", interp.eval("7"))
    assert stringify(interp.eval("(* x 6)", env)) == "42"
    assert "x" not in interp.global_env


def test_eval_all_returns_last_value(interp):
    result = interp.eval_all("""
    ; a small program
    (define (square x) (* x x))
    (define y (square 6))
    (+ y 6)
    """)
    assert stringify(result) == "42"


def test_eval_all_of_nothing_is_nil(interp):
    assert interp.eval_all("; nothing here\n") is Nil


def test_interpreters_are_independent():
    a = Interpreter()
    b = Interpreter()
    a.eval("(define shared 1)")
    assert "shared" in a.global_env
    with pytest.raises(LispRuntimeError):
        b.eval("shared")


def test_apply_from_host(interp):
    proc = interp.eval("(lambda (a b) (- a b))")
    assert stringify(interp.apply(proc, [interp.eval("10"), interp.eval("3")])) == "7"
    with pytest.raises(LispRuntimeError):
        interp.apply(42, [])


def test_register_procedure(interp):
    calls = []

    def record(_, args):
        calls.append(list(args))
        return len(args)

    interp.register_procedure("record", record)
    assert stringify(interp.eval("(record 1 (+ 1 1) 'x)")) == "3"
    assert stringify(calls[0]) == "(1 2 x)"


def test_register_procedure_with_unevaluated_args(interp):
    def quote_all(_, args, env):
        assert env is interp.global_env
        return list(args)

    interp.register_procedure("quote-all", quote_all, receives_unevaluated_args=True)
    assert stringify(interp.eval("(quote-all (+ 1 2) undefined)")) == "((+ 1 2) undefined)"


def test_unevaluated_primitive_sees_calling_scope(interp):
    interp.register_procedure(
        "peek", lambda itp, args, env: env.lookup(args[0].name), receives_unevaluated_args=True
    )
    assert stringify(interp.eval("((lambda (secret) (peek secret)) 42)")) == "42"


def test_primitive_returning_none_yields_nil(interp):
    interp.register_procedure("nothing", lambda _, args: None)
    assert interp.eval("(nothing)") is Nil


def test_symbol_resolver_results_are_cached_globally(interp):
    seen = []

    def resolver(_, name):
        seen.append(name)
        if name == "answer":
            return interp.eval("42")
        return None

    interp.register_symbol_resolver("answers", resolver)
    assert stringify(interp.eval("(+ answer answer)")) == "84"
    assert stringify(interp.eval("answer")) == "42"
    assert seen == ["answer"]
    assert "answer" in interp.global_env
    with pytest.raises(LispRuntimeError):
        interp.eval("question")


def test_prelude_from_text():
    interp = Interpreter(prelude="(define greeting 'hi) (define (greet) greeting)")
    assert stringify(interp.eval("(greet)")) == "hi"
    assert not interp.macros.is_macro("and")


def test_prelude_from_configured_path(tmp_path, monkeypatch):
    prelude = tmp_path / "custom.lisp"
    prelude.write_text("; custom prelude\n(define-macro unless (lambda (c body) `(if ,c nil ,body)))\n")
    monkeypatch.setenv("UNILISP_PRELUDE_PATH", str(prelude))
    interp = Interpreter()
    assert interp.macros.is_macro("unless")
    assert stringify(interp.eval("(unless #f 'ran)")) == "ran"


def test_missing_prelude_is_not_fatal(tmp_path, monkeypatch, caplog):
    monkeypatch.setenv("UNILISP_PRELUDE_PATH", str(tmp_path / "missing.lisp"))
    interp = Interpreter()
    assert not interp.macros.is_macro("and")
    assert stringify(interp.eval("(+ 1 1)")) == "2"
    assert "not found" in caplog.text


def test_eval_treats_python_strings_as_source(interp):
    value = interp.eval('"(+ 1 2)"')
    assert value == "(+ 1 2)"
    assert stringify(interp.eval(value)) == "3"
    assert interp.evaluator.evaluate(value, interp.global_env) == "(+ 1 2)"
