import pytest

from pegmatch import (
    P, S, R, V, C, Cc, Cp, and_, or_, rep, sub, invert, lookahead, match,
    Success, FAILURE, Matcher,
)


@pytest.mark.parametrize("s", ["", "a", "hello", "héllo wörld", "\n\t"])
def test_literal_consumes_exactly_its_length(s):
    assert match(P(s), s).end == len(s)
    assert match(P(s), s + "x").end == len(s)


def test_literal_mismatch_fails():
    assert match(P("abc"), "abd") is FAILURE
    assert match(P("abc"), "ab") is FAILURE
    assert not match(P("abc"), "xabc")


def test_truth():
    assert match(P(True), "") == Success(0, ())
    assert match(P(True), "abc") == Success(0, ())
    assert match(P(False), "abc") is FAILURE


def test_length_patterns():
    assert match(P(3), "abcd").end == 3
    assert match(P(3), "abc").end == 3
    assert match(P(3), "ab") is FAILURE
    assert match(P(0), "").end == 0
    # fewer than n characters remain, zero width
    assert match(P(-1), "").end == 0
    assert match(P(-1), "a") is FAILURE
    assert match(P(-3), "ab").end == 0
    assert match(P("a") * P(-1), "a").end == 1
    assert match(P("a") * P(-1), "ab") is FAILURE


def test_charset_and_range():
    vowels = S("aeiou")
    assert match(vowels, "exit").end == 1
    assert match(vowels, "xe") is FAILURE
    assert match(vowels, "") is FAILURE
    assert match(S(""), "a") is FAILURE
    digits = R("09")
    assert match(digits, "7").end == 1
    assert match(digits, "a") is FAILURE
    alnum = R("az", "AZ", "09")
    assert match(rep(alnum), "aZ9_").end == 3


def test_charset_with_class_metacharacters():
    meta = S("]-^\\[")
    assert match(rep(meta), "]-^\\[x").end == 5
    assert match(meta, "a") is FAILURE
    assert match(R("--"), "-").end == 1
    assert match(R("\x00\x1f"), "\t").end == 1


def test_charset_unicode():
    greek = R("αω")
    assert match(rep(greek, 1), "λ\u03ccγος").end == 1  # U+03CC is past ω
    assert match(S("ü→"), "→").end == 1


def test_sequence_concatenates_and_advances():
    p = P("ab") * P("cd")
    assert match(p, "abcde").end == 4
    assert match(p, "abce") is FAILURE
    caps = match(C("a") * C("b"), "ab").values
    assert caps == ("a", "b")


def test_choice_is_ordered():
    assert match(P("a") + P("ab"), "ab").end == 1
    assert match(P("ab") + P("a"), "ab").end == 2
    assert match(P("x") + P("a"), "ab").end == 1
    assert match(P("x") + P("y"), "ab") is FAILURE


def test_choice_never_retries_after_commit():
    # the first alternative succeeds, the sequence then fails; the second
    # alternative (which would make the whole sequence succeed) is not tried
    p = (C("a") * Cc("first") + C("ab") * Cc("second")) * P("c")
    assert match(p, "abc") is FAILURE
    assert match(p, "ac").values == ("a", "first")


def test_repeat_at_least_zero_is_greedy_and_always_succeeds():
    p = rep("a", 0)
    assert match(p, "").end == 0
    assert match(p, "bbb").end == 0
    assert match(p, "aaab").end == 3


def test_repeat_at_least_n():
    p = rep(R("09"), 2)
    assert match(p, "1") is FAILURE
    assert match(p, "12").end == 2
    assert match(p, "12345x").end == 5


def test_repeat_is_not_backtracking():
    # PEG repetition is greedy: a* a never matches
    assert match(rep("a") * "a", "aaa") is FAILURE


def test_repeat_at_most_n():
    p = rep("a", -2)
    assert match(p, "").end == 0
    assert match(p, "a").end == 1
    assert match(p, "aaaa").end == 2
    assert match(p * "a", "aaa").end == 3


def test_repeat_of_zero_width_pattern_terminates():
    assert match(rep(P(True)), "abc").end == 0
    assert match(rep(P(True), 3), "abc").end == 0
    assert match(rep(rep("x")), "xxy").end == 2
    # the required iterations may be zero width, extra ones are dropped
    assert match(rep(Cc(1), 2), "").values == (1, 1)
    assert match(rep(Cp(), 0), "ab").values == ()


def test_repeat_at_most_counts_zero_width_iterations():
    assert match(rep(Cc("x"), -3), "").values == ("x", "x", "x")


def test_difference():
    not_x = sub(R("az"), S("x"))
    assert match(not_x, "a").end == 1
    assert match(not_x, "x") is FAILURE
    assert match(not_x, "A") is FAILURE
    # the excluded pattern only needs to match at the start
    assert match(sub(P(1), P("ab")), "ac").end == 1
    assert match(sub(P(1), P("ab")), "ab") is FAILURE


def test_difference_idiom_scans_to_delimiter():
    upto_semicolon = rep(sub(P(1), ";"))
    assert match(upto_semicolon, "abc;def").end == 3


def test_invert_is_zero_width_without_captures():
    p = invert(C("a"))
    assert match(p, "b") == Success(0, ())
    assert match(p, "a") is FAILURE
    assert match(-P("a") * C(P(1)), "b").values == ("b",)
    # end-of-input idiom
    eof = -P(1)
    assert match(P("ab") * eof, "ab").end == 2
    assert match(P("ab") * eof, "abc") is FAILURE


def test_lookahead_is_zero_width_without_captures():
    p = lookahead(C("ab"))
    assert match(p, "abc") == Success(0, ())
    assert match(p, "ac") is FAILURE
    assert match(+P("a") * C(P(2)), "ab").values == ("ab",)


def test_failed_branches_leak_no_captures():
    p = (C("a") * C("x")) + (C("a") * C("b"))
    assert match(p, "ab").values == ("a", "b")
    q = rep(C(P(1)) * ",")
    assert match(q, "a,b,c").values == ("a", "b")


def test_init_position():
    assert match(C(P(2)), "abcd", init=1) == Success(3, match(C(P(2)), "bc").captures)
    assert match(P("d"), "abcd", init=-1).end == 4
    assert match(P(-1), "abcd", init=99).end == 4
    assert match(P("a"), "abcd", init=-99).end == 1
    assert match(Cp(), "abc", init=2).values == (2,)
    with pytest.raises(TypeError):
        match(P("a"), "a", init="0")


def test_coerces_pattern_argument():
    assert match("ab", "abc").end == 2
    assert match(2, "abc").end == 2


def test_string_primitives_fail_on_objects():
    for p in (P("a"), P(1), P(-1), S("a"), R("az")):
        assert match(p, {"a": 1}) is FAILURE
    assert match(P(True), {"a": 1}) == Success(0, ())


def test_idempotent_results():
    p = C(rep(R("az"), 1)) * rep(" " * C(rep(R("az"), 1)))
    first = match(p, "one two three")
    second = match(p, "one two three")
    assert first == second
    assert first.values == ("one", "two", "three")


def test_matcher_is_reusable():
    m = Matcher(C(rep(R("09"), 1)))
    assert m.match("12a").values == ("12",)
    assert m.match("x") is FAILURE
    assert m.match("x3", init=1).values == ("3",)


def test_failure_is_falsy_and_success_truthy():
    assert bool(FAILURE) is False
    assert bool(Success(0)) is True
    assert repr(FAILURE) == "FAILURE"
