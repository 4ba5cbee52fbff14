"""
Tests for Arrow Function Lowering.

Verifies:
1. Arrows become function expressions; expression bodies get a `return`.
2. `this` and `arguments` inside nested arrows are rebound through temporaries.
3. The root worklet and nested regular functions keep their own `this`.
"""

from workletizer.core.js.emitter import to_source
from workletizer.core.normalizer.passes import ArrowFunctionPass
from workletizer.core.normalizer.pipeline import NormalizationPipeline


def lower(parse_fn, code: str) -> str:
  fn = parse_fn(code)
  return to_source(NormalizationPipeline([ArrowFunctionPass()]).run(fn), compact=True)


def test_expression_body_becomes_return(parse_fn):
  assert lower(parse_fn, "function f() { return (a) => a + 1; }") == "function f(){return function(a){return a+1;};}"


def test_this_in_nested_arrow_is_rebound(parse_fn):
  assert (
    lower(parse_fn, "function f() { return () => this.x; }")
    == "function f(){var _this=this;return function(){return _this.x;};}"
  )


def test_arguments_in_nested_arrow_is_rebound(parse_fn):
  assert (
    lower(parse_fn, "function f() { return () => arguments[0]; }")
    == "function f(){var _arguments=arguments;return function(){return _arguments[0];};}"
  )


def test_root_arrow_keeps_this(parse_fn):
  assert lower(parse_fn, "() => this.x") == "function(){return this.x;}"


def test_nested_regular_function_keeps_its_own_this(parse_fn):
  assert (
    lower(parse_fn, "function f() { return () => function () { return this; }; }")
    == "function f(){return function(){return function(){return this;};};}"
  )


def test_async_arrow_stays_async(parse_fn):
  assert lower(parse_fn, "async () => { await g(); }") == "async function(){await g();}"
