"""
Batch evaluation over pykka actors
"""

import pytest
import pykka
from actors import (
  evaluate_many, make_batch_context, make_message, run_command,
  ActorPool, ExpressionActor
)
from parsing import parse_string, token_texts
from interpreter import interpret
from compiler import compile_to_infix
from error_handling import ArithError, ParseError, DivisionByZeroError


SOURCES = [
  "(+ 1 2 3)",
  "(* -1 2 (/ 9 (+ 1 2)))",
  "(+ -1 2 (* 1 3 5))",
  "(- 10 3 2 1)",
  "(/ 64 4 2 2)",
]


class TestEvaluateMany:
  """Running many pipelines in parallel"""

  @pytest.fixture(autouse=True)
  def no_leaked_actors(self):
    yield
    assert pykka.ActorRegistry.get_all() == []

  def test_interpret_in_order(self):
    assert evaluate_many(SOURCES, workers=3) == [6, -6, 16, 4, 4]

  def test_compile(self):
    results = evaluate_many(SOURCES[2:3], command='compile')
    assert results == ["( -1 + 2 + ( 1 * 3 * 5 ) )"]

  def test_tokenize_and_parse(self):
    tokens, = evaluate_many(["(+ 1 2)"], command='tokenize')
    assert token_texts(tokens) == ["(", "+", "1", "2", ")"]
    tree, = evaluate_many(["(+ 1 2)"], command='parse')
    assert tree == parse_string("(+ 1 2)")

  def test_matches_sequential_results(self):
    sequential = [interpret(parse_string(source)) for source in SOURCES]
    assert evaluate_many(SOURCES, workers=2) == sequential
    compiled = [compile_to_infix(parse_string(source)) for source in SOURCES]
    assert evaluate_many(SOURCES, command='compile', workers=2) == compiled

  def test_empty_batch(self):
    assert evaluate_many([]) == []

  def test_error_propagates(self):
    with pytest.raises(DivisionByZeroError):
      evaluate_many(["(+ 1 2)", "(/ 1 (- 2 2))"], context=make_batch_context(timeout=5.0))

  def test_parse_error_propagates(self):
    with pytest.raises(ParseError):
      evaluate_many(["(+ 1 2"])

  def test_unknown_command(self):
    with pytest.raises(ArithError):
      evaluate_many(SOURCES, command='optimize')

  def test_invalid_worker_count(self):
    with pytest.raises(ArithError):
      evaluate_many(SOURCES, workers=0)


class TestActors:
  """Actor plumbing"""

  def test_pool_round_robin_and_stop(self):
    with ActorPool(2) as pool:
      assert len(pool) == 2
      actors = list(pool.actors)
      futures = pool.submit([make_message('interpret', "(* 2 21)"), make_message('compile', "(- 5 1)")])
      assert [f.get(timeout=5.0) for f in futures] == [42, "( 5 - 1 )"]
    assert not any(actor_ref.is_alive() for actor_ref in actors)
    assert len(pool) == 0

  def test_pool_needs_a_worker(self):
    with pytest.raises(ArithError):
      ActorPool(0)

  def test_actor_survives_failed_request(self):
    actor_ref = ExpressionActor.start("worker", False)
    try:
      with pytest.raises(DivisionByZeroError):
        actor_ref.ask(make_message('interpret', "(/ 1 0)"))
      assert actor_ref.ask(make_message('compile', "(+ 1 2)")) == "( 1 + 2 )"
    finally:
      actor_ref.stop()

  def test_run_command(self):
    assert run_command('interpret', "(+ 1 2)") == 3

  def test_batch_context(self):
    assert make_batch_context() == {'debug': False, 'timeout': 5.0}
