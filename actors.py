"""
Batch evaluation over a pool of pykka actors
Expression trees are immutable, so each actor runs its own pipeline with no locking
"""

from typing import Any, Dict, List, Optional
import uuid

import pykka

from parsing import tokenize, parse
from interpreter import interpret
from compiler import compile_to_infix
from error_handling import ArithError


COMMANDS = ('tokenize', 'parse', 'interpret', 'compile')


def make_batch_context(debug: bool = False, timeout: Optional[float] = 5.0) -> Dict:
  """Create an immutable batch configuration"""
  return {
      'debug': debug,
      'timeout': timeout
  }


def make_message(command: str, source: str) -> Dict:
  """Create a request for an ExpressionActor"""
  if command not in COMMANDS:
    raise ArithError(f"Unknown batch command: {command!r}")
  return {
      'command': command,
      'source': source
  }


def run_command(command: str, source: str, debug: bool = False) -> Any:
  """Run the pipeline up to the stage named by command"""
  tokens = tokenize(source, debug)
  if command == 'tokenize':
    return tokens

  tree = parse(tokens, debug)
  if command == 'parse':
    return tree
  if command == 'interpret':
    return interpret(tree, debug)
  return compile_to_infix(tree, debug)


# ============================================================================
# ACTOR SYSTEM (Using Pykka)
# ============================================================================

class ExpressionActor(pykka.ThreadingActor):
  """Actor that runs the arith pipeline for each message it is asked"""

  def __init__(self, actor_id: str, debug: bool = False):
    super().__init__()
    self.actor_id = actor_id
    self.debug = debug

  def on_receive(self, message):
    """Errors raised here are delivered to the asking future"""
    if self.debug:
      print(f"Actor {self.actor_id}: {message['command']} {message['source']!r}")
    return run_command(message['command'], message['source'], self.debug)


class ActorPool:
  """Fixed set of ExpressionActors fed round-robin, stopped as a unit"""

  def __init__(self, size: int, debug: bool = False):
    if size < 1:
      raise ArithError(f"workers must be at least 1, got {size}")
    self.actors: List[pykka.ActorRef] = [
        ExpressionActor.start(str(uuid.uuid4()), debug) for _ in range(size)
    ]

  def __len__(self) -> int:
    return len(self.actors)

  def submit(self, messages: List[Dict]) -> List[pykka.Future]:
    """Ask every message without blocking, one actor per message in turn"""
    return [self.actors[i % len(self.actors)].ask(message, block=False)
            for i, message in enumerate(messages)]

  def stop_all(self):
    """Stop every actor in the pool"""
    for actor_ref in self.actors:
      # stop() returns False for an actor that is already dead
      actor_ref.stop()
    self.actors = []

  def __enter__(self) -> "ActorPool":
    return self

  def __exit__(self, exc_type, exc_val, exc_tb):
    self.stop_all()
    return False


def evaluate_many(sources: List[str], command: str = 'interpret', workers: int = 4,
                  context: Optional[Dict] = None) -> List[Any]:
  """
  Run command over every source string on a pool of actors.

  Results come back in input order. The first failure is raised to the
  caller and the pool is always stopped.
  """
  if context is None:
    context = make_batch_context()
  if workers < 1:
    raise ArithError(f"workers must be at least 1, got {workers}")

  messages = [make_message(command, source) for source in sources]
  if not messages:
    return []

  with ActorPool(min(workers, len(messages)), context['debug']) as pool:
    futures = pool.submit(messages)
    return [future.get(timeout=context['timeout']) for future in futures]
