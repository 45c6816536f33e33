import math

import numpy as np
import pytest

from unilisp.errors import LispRuntimeError


@pytest.mark.parametrize(
    "code,expected",
    [
        ("(+ 1 2)", "3"),
        ("(+ 1 2 3 4)", "10"),
        ("(- 12 1 2 3)", "6"),
        ("(* 2 3 7)", "42"),
        ("(/ 12 2 3)", "2"),
        ("(/ 1 4)", "0.25"),
        ("(+ 0.5 0.25)", "0.75"),
        ("(/ 1 0)", "inf"),
        ("(/ -1 0)", "-inf"),
        ("(> 2 1)", "#t"),
        ("(> 1 2)", "#f"),
        ("(< 1 2 3)", "#t"),
        ("(< 1 3 2)", "#f"),
        ("(>= 2 2 1)", "#t"),
        ("(<= 1 1 2)", "#t"),
        ("(= 4 4)", "#t"),
        ("(= 4 4 5)", "#f"),
        ("(equal? 4 4.0)", "#t"),
        ("(sqrt 16)", "4"),
        ("(abs -3)", "3"),
        ("(sign -3)", "-1"),
        ("(cos 0)", "1"),
        ("(sin 0)", "0"),
        ("(tan 0)", "0"),
    ]
)
def test_arithmetic_and_comparison(run, code, expected):
    assert run(code) == expected


def test_numbers_are_single_precision(interp):
    value = interp.eval("(/ 1 3)")
    assert isinstance(value, np.float32)
    assert value == np.float32(1) / np.float32(3)
    assert math.isnan(float(interp.eval("(sqrt -1)")))


@pytest.mark.parametrize(
    "code",
    [
        "(+)",
        "(+ 1)",
        "(+ #t 1)",
        '(* 2 "3")',
        "(< 1 'a)",
        "(equal? 1 #f)",
        "(sqrt)",
        "(sqrt 'x)",
    ]
)
def test_arithmetic_errors(interp, code):
    with pytest.raises(LispRuntimeError):
        interp.eval(code)


@pytest.mark.parametrize(
    "code,expected",
    [
        ("(eq? 1 1)", "#t"),
        ("(eq? 1 #f)", "#f"),
        ("(eq? #t #t)", "#t"),
        ('(eq? "ping" "ping")', "#f"),
        ("(eq? 'ping 'ping)", "#t"),
        ("(eq? 'ping 'pong)", "#f"),
        ("(eq? '(1) '(1))", "#f"),
        ("(begin (define l '(1)) (eq? l l))", "#t"),
        ("(eq? car car)", "#t"),
        ("(eq? nil nil)", "#t"),
    ]
)
def test_eq(run, code, expected):
    assert run(code) == expected


@pytest.mark.parametrize(
    "code,expected",
    [
        ("(number? 1)", "#t"),
        ("(number? '1)", "#t"),
        ("(number? 'a)", "#f"),
        ("(list? '(1))", "#t"),
        ("(list? '())", "#t"),
        ("(list? 1)", "#f"),
        ("(symbol? 'a)", "#t"),
        ('(symbol? "a")', "#f"),
        ('(string? "a")', "#t"),
        ("(string? 'a)", "#f"),
        ("(boolean? #f)", "#t"),
        ("(boolean? 0)", "#f"),
        ("(null? '())", "#t"),
        ("(null? nil)", "#t"),
        ("(null? '(1))", "#f"),
        ("(null? 0)", "#f"),
    ]
)
def test_predicates(run, code, expected):
    assert run(code) == expected


@pytest.mark.parametrize(
    "code,expected",
    [
        ("(list)", "()"),
        ("(list 1 (+ 1 1) 'three)", "(1 2 three)"),
        ("(car '(1 2 3))", "1"),
        ("(first '(1 2 3))", "1"),
        ("(cdr '(1 2 3))", "(2 3)"),
        ("(rest '(1))", "()"),
        ("(cons 1 '(2 3))", "(1 2 3)"),
        ("(cons '(1) '())", "((1))"),
        ("(append '(1) '(2) '(3 4 5))", "(1 2 3 4 5)"),
        ("(append '(1))", "(1)"),
        ("(concat '(1) '() '(2))", "(1 2)"),
        ("(length '())", "0"),
        ("(length '(1 2 3))", "3"),
    ]
)
def test_list_operations(run, code, expected):
    assert run(code) == expected


@pytest.mark.parametrize(
    "code",
    [
        "(car '())",
        "(car 1)",
        "(cdr '())",
        "(cdr 'a)",
        "(cons 1 2)",
        "(cons 1)",
        "(append '(1) 2)",
        "(length 5)",
    ]
)
def test_list_errors(interp, code):
    with pytest.raises(LispRuntimeError):
        interp.eval(code)


def test_list_operations_do_not_share_structure(run):
    run("(define l '(1 2 3))")
    run("(define m (cons 0 l))")
    run("(define n (append l l))")
    assert run("l") == "(1 2 3)"
    assert run("m") == "(0 1 2 3)"
    assert run("n") == "(1 2 3 1 2 3)"


@pytest.mark.parametrize(
    "code,expected",
    [
        ("(eval '(begin '(1 2 3)))", "(1 2 3)"),
        ('(eval "ping")', '"ping"'),
        ("(eval '(+ 1 4 5))", "10"),
        ("(eval (list '+ 1 2))", "3"),
        ("(eval ''sym)", "sym"),
        ("(eval '(let ((x 2)) (* x x)))", "4"),
        ("(begin (define (twice x) (* x x)) (map twice '(1 2 3 4)))", "(1 4 9 16)"),
        ("(map (lambda (x) (+ x 1)) '())", "()"),
        ("(map car '((1 2) (3 4)))", "(1 3)"),
        ("(apply + '(1 2 3))", "6"),
        ("(apply (lambda args args) '(1 2))", "(1 2)"),
        ("(apply list '())", "()"),
    ]
)
def test_eval_map_apply(run, code, expected):
    assert run(code) == expected


@pytest.mark.parametrize(
    "code",
    [
        "(eval '(1 4 5))",
        "(eval 'undefined-symbol)",
        "(eval)",
        "(map + 1)",
        "(map 1 '(1))",
        "(map car)",
        "(apply + 1)",
        "(apply 1 '(1))",
    ]
)
def test_eval_map_apply_errors(interp, code):
    with pytest.raises(LispRuntimeError):
        interp.eval(code)


def test_eval_runs_in_global_scope(run):
    run("(define x 'global)")
    assert run("((lambda (x) (eval 'x)) 'local)") == "global"


def test_while(run):
    assert run("""
    (begin
      (define i 0)
      (while (< i 3)
        (set! i (+ i 1)))
      i)
    """) == "3"


def test_while_returns_last_body_value(run):
    run("(define i 0)")
    assert run("(while (< i 3) (set! i (+ i 1)) (* i 10))") == "30"
    assert run("(while #f 1)") == "nil"


def test_while_in_local_scope(run):
    run("""
    (define (count-up n)
      (let ((i 0) (acc '()))
        (while (< i n)
          (set! acc (cons i acc))
          (set! i (+ i 1)))
        acc))
    """)
    assert run("(count-up 4)") == "(3 2 1 0)"
    assert run("(count-up 0)") == "()"


@pytest.mark.parametrize("code", ["(while 2)", "(while)"])
def test_while_errors(interp, code):
    with pytest.raises(LispRuntimeError):
        interp.eval(code)
