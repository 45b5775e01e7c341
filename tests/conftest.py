"""Shared test fixtures for wordnet-index."""

import random

import pytest

import corpus
from wordnet_index import db
from wordnet_index.backends import MemoryBackend, SqliteBackend
from wordnet_index.builder import build
from wordnet_index.wordnet import WordNet


@pytest.fixture
def sample_resource():
    """A fresh copy of the sample corpus (safe to mutate)."""
    return corpus.sample()


@pytest.fixture
def cat_dog_resource():
    """The two-word cat/dog corpus."""
    return corpus.cat_dog()


def open_backend(kind, resource):
    """Build ``resource`` and serve it through a fresh backend of ``kind``."""
    index = build(resource)
    if kind == "memory":
        return MemoryBackend(index)
    backend = SqliteBackend(db.connect(":memory:"))
    backend.populate(index)
    return backend


@pytest.fixture(params=["memory", "sqlite"])
def make_wordnet(request):
    """Factory building a WordNet over each backend in turn."""
    opened = []

    def _make(resource):
        wn = WordNet(open_backend(request.param, resource), rng=random.Random(7))
        opened.append(wn)
        return wn

    yield _make
    for wn in opened:
        wn.close()


@pytest.fixture
def wordnet(make_wordnet, sample_resource):
    """The sample corpus, once per backend."""
    return make_wordnet(sample_resource)
