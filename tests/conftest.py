from __future__ import annotations

import itertools
from typing import Callable, Iterable

import pytest

from tetromino_engine.game import Field, TetrominoType


KindFactory = Callable[..., Callable[[], TetrominoType]]


def _kinds(first: Iterable[TetrominoType] = (), then: TetrominoType = TetrominoType.O) -> Callable[[], TetrominoType]:
    it = itertools.chain(first, itertools.repeat(then))
    return lambda: next(it)


@pytest.fixture
def kinds() -> KindFactory:
    """Piece source factory: yields ``first`` in order, then ``then`` forever."""
    return _kinds


@pytest.fixture
def o_field() -> Field:
    return Field(kind_source=_kinds((), TetrominoType.O))


@pytest.fixture
def t_field() -> Field:
    return Field(kind_source=_kinds((), TetrominoType.T))
