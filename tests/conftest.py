"""
Shared pytest fixtures for chain engine and service tests.
"""
import random
from pathlib import Path
from typing import List

import pytest

from fakegen.services.chain import Chain


@pytest.fixture
def sample_corpus() -> List[str]:
    """Sample text corpus, one sentence per line."""
    return [
        "the cat sat on the mat",
        "the dog sat on the log",
        "a cat and a dog became friends",
        "the stars are beautiful tonight",
        "I love exploring new planets and stars",
        "",
        "friends always support each other",
        "the mat was red and the log was brown",
    ]


@pytest.fixture
def vocabulary(sample_corpus) -> set:
    """Every word appearing in sample_corpus."""
    return {w for line in sample_corpus for w in line.split()}


@pytest.fixture
def rng() -> random.Random:
    """Fixed-seed random source for reproducible draws."""
    return random.Random(1234)


@pytest.fixture
def chain(rng) -> Chain:
    """Empty chain with a fixed-seed random source."""
    return Chain(rng=rng)


@pytest.fixture
def trained_chain(chain, sample_corpus) -> Chain:
    """Chain trained on sample_corpus."""
    chain.ingest_source(sample_corpus)
    return chain


@pytest.fixture
def corpus_path(sample_corpus, tmp_path) -> Path:
    """Temporary corpus file with sample_corpus."""
    file_path = tmp_path / "corpus.txt"
    file_path.write_text("\n".join(sample_corpus) + "\n", encoding="utf-8")
    return file_path

