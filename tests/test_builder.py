"""Tests for index construction and synset membership derivation."""

import logging

import pytest

import corpus
from corpus import entry, lexicon, rel, resource, sense, synset
from wordnet_index import (
    FormatError,
    PartOfSpeech,
    SenseRelationType,
    SynsetRelationType,
    build,
    build_with_report,
)


class TestIndices:
    def test_lemma_index_is_case_folded(self, sample_resource):
        index = build(sample_resource)
        assert index.lemma_index["kitty"] == ("w-kitty",)
        assert "Kitty" not in index.lemma_index

    def test_lemma_pos_index(self, sample_resource):
        index = build(sample_resource)
        assert index.lemma_index["run"] == ("w-run-n", "w-run-v")
        assert index.lemma_pos_index[("run", PartOfSpeech.VERB)] == ("w-run-v",)
        assert index.lemma_pos_index[("run", PartOfSpeech.NOUN)] == ("w-run-n",)

    def test_sense_entry_links(self, sample_resource):
        index = build(sample_resource)
        for entry_id, sense_ids in index.entry_senses.items():
            for sense_id in sense_ids:
                assert index.sense_entry[sense_id] == entry_id
        assert index.sense_synset["s-cat-1"] == "syn1"

    def test_relation_indices(self, sample_resource):
        index = build(sample_resource)
        assert index.synset_relations["syn3"][SynsetRelationType.HYPONYM] == (
            "syn1", "syn2",
        )
        assert index.sense_relations["s-run-v-1"][SenseRelationType.DERIVATION] == (
            "s-run-n-1",
        )

    def test_entry_ids_in_load_order(self, sample_resource):
        index = build(sample_resource)
        assert index.entry_ids[:3] == ("w-cat", "w-kitty", "w-dog")
        assert len(index.entry_ids) == 10

    def test_lexicon_metadata(self, sample_resource):
        lex = build(sample_resource).lexicons[0]
        assert lex.id == "test"
        assert lex.publisher == "Test Publisher"
        assert lex.status == "draft"
        assert lex.confidence_score == pytest.approx(0.9)
        assert lex.url is None

    def test_dc_prefixed_metadata(self):
        res = resource(lexicon(meta={"dc:publisher": "Prefixed"}))
        assert build(res).lexicons[0].publisher == "Prefixed"

    def test_pronunciations(self, sample_resource):
        cat = build(sample_resource).entries["w-cat"]
        assert len(cat.pronunciations) == 1
        pron = cat.pronunciations[0]
        assert pron.text == "kæt"
        assert pron.variety == "GB"
        assert pron.notation is None
        assert pron.phonemic is True


class TestMembership:
    def test_members_span_two_synsets(self):
        """An entry's senses in two synsets each land only in their own."""
        res = resource(lexicon(
            entries=[
                entry("w-bank", "bank", "n", [
                    sense("s-bank-1", "syn-river"),
                    sense("s-bank-2", "syn-money"),
                ]),
            ],
            synsets=[
                synset("syn-river", "n", "w-bank"),
                synset("syn-money", "n", "w-bank"),
            ],
        ))
        index = build(res)
        assert index.synset_members["syn-river"] == ("s-bank-1",)
        assert index.synset_members["syn-money"] == ("s-bank-2",)

    def test_member_with_sense_elsewhere_is_dropped(self, caplog):
        """members="w1 w2" where w2's only sense targets another synset."""
        res = resource(lexicon(
            entries=[
                entry("w1", "one", "n", [sense("s1", "syn-a")]),
                entry("w2", "two", "n", [sense("s2", "syn-b")]),
            ],
            synsets=[
                synset("syn-a", "n", "w1 w2"),
                synset("syn-b", "n", "w2"),
            ],
        ))
        with caplog.at_level(logging.WARNING, logger="wordnet_index.builder"):
            index, report = build_with_report(res)
        assert index.synset_members["syn-a"] == ("s1",)
        assert report.dropped_members == 1
        assert "Dropped 1 synset member reference" in caplog.text

    def test_unknown_member_entry_is_dropped(self):
        res = resource(lexicon(
            entries=[entry("w1", "one", "n", [sense("s1", "syn-a")])],
            synsets=[synset("syn-a", "n", "w1 ghost")],
        ))
        index, report = build_with_report(res)
        assert index.synset_members["syn-a"] == ("s1",)
        assert report.dropped_members == 1

    def test_members_as_list(self):
        res = resource(lexicon(
            entries=[entry("w1", "one", "n", [sense("s1", "syn-a")])],
            synsets=[synset("syn-a", "n", ["w1"])],
        ))
        assert build(res).synset_members["syn-a"] == ("s1",)

    def test_duplicate_member_collapses(self):
        res = resource(lexicon(
            entries=[entry("w1", "one", "n", [sense("s1", "syn-a")])],
            synsets=[synset("syn-a", "n", "w1 w1")],
        ))
        index, report = build_with_report(res)
        assert index.synset_members["syn-a"] == ("s1",)
        assert index.synsets["syn-a"].members == ("w1",)
        assert report.dropped_members == 0

    def test_member_order_follows_members_list(self):
        res = resource(lexicon(
            entries=[
                entry("w1", "one", "n", [sense("s1", "syn-a")]),
                entry("w2", "two", "n", [sense("s2", "syn-a")]),
            ],
            synsets=[synset("syn-a", "n", "w2 w1")],
        ))
        assert build(res).synset_members["syn-a"] == ("s2", "s1")

    def test_missing_members_inferred_from_senses(self):
        """Documents without a members list (WN-LMF 1.0)."""
        res = resource(lexicon(
            entries=[
                entry("w1", "one", "n", [sense("s1", "syn-a")]),
                entry("w2", "two", "n", [sense("s2", "syn-a")]),
            ],
            synsets=[synset("syn-a", "n", [])],
        ))
        index, report = build_with_report(res)
        assert index.synset_members["syn-a"] == ("s1", "s2")
        assert index.synsets["syn-a"].members == ("w1", "w2")
        assert report.inferred_memberships == 1

    def test_members_across_lexicons(self):
        res = resource(
            lexicon(synsets=[synset("syn-a", "n", "w1")], lex_id="core"),
            lexicon(entries=[entry("w1", "one", "n", [sense("s1", "syn-a")])],
                    lex_id="ext"),
        )
        assert build(res).synset_members["syn-a"] == ("s1",)


class TestTolerantIngest:
    def test_unknown_relation_kind_is_indexed(self, sample_resource, caplog):
        with caplog.at_level(logging.WARNING, logger="wordnet_index.builder"):
            index, report = build_with_report(sample_resource)
        assert index.sense_relations["s-run-v-1"][SenseRelationType.UNKNOWN] == (
            "s-run-n-1",
        )
        assert index.synset_relations["syn8"][SynsetRelationType.UNKNOWN] == ("syn7",)
        assert report.unknown_relation_kinds == 2
        assert report.unknown_relation_types == {"fancy_new_relation", "something_else"}
        assert "fancy_new_relation" in caplog.text

    def test_raw_relation_type_is_kept(self, sample_resource):
        sense_ = build(sample_resource).senses["s-run-v-1"]
        assert [r.rel_type for r in sense_.relations] == [
            "derivation", "fancy_new_relation",
        ]

    def test_dangling_references_are_counted_not_fatal(self):
        res = resource(lexicon(
            entries=[
                entry("w1", "one", "n", [
                    sense("s1", "syn-missing", [rel("s-ghost", "antonym")]),
                ]),
            ],
            synsets=[synset("syn-a", "n", "", relations=[rel("syn-ghost", "hypernym")])],
        ))
        index, report = build_with_report(res)
        assert report.dangling_sense_synsets == 1
        assert report.dangling_sense_relations == 1
        assert report.dangling_synset_relations == 1
        assert index.sense_synset["s1"] == "syn-missing"
        assert index.synset_relations["syn-a"][SynsetRelationType.HYPERNYM] == (
            "syn-ghost",
        )

    def test_duplicate_ids_first_wins(self, caplog):
        res = resource(lexicon(
            entries=[
                entry("w1", "one", "n", [sense("s1", "syn-a")]),
                entry("w1", "uno", "n", [sense("s9", "syn-a")]),
                entry("w2", "two", "n", [sense("s1", "syn-a")]),
            ],
            synsets=[synset("syn-a", "n", "w1 w2"), synset("syn-a", "v", "")],
        ))
        with caplog.at_level(logging.WARNING, logger="wordnet_index.builder"):
            index, report = build_with_report(res)
        assert report.duplicate_ids == 3
        assert index.entries["w1"].lemma.written_form == "one"
        assert index.entries["w2"].senses == ()
        assert index.synsets["syn-a"].pos is PartOfSpeech.NOUN
        assert "Duplicate entry id w1" in caplog.text

    def test_duplicate_lexicon_id_first_wins(self, caplog):
        first = lexicon(entries=[entry("w-a", "a", "n")], meta={"publisher": "First"})
        second = lexicon(entries=[entry("w-b", "b", "n")], meta={"publisher": "Second"})
        with caplog.at_level(logging.WARNING, logger="wordnet_index.builder"):
            index, report = build_with_report(resource(first, second))
        assert [lex.publisher for lex in index.lexicons] == ["First"]
        assert report.duplicate_ids == 1
        assert index.entries["w-b"].lexicon_id == "test"
        assert "Duplicate lexicon id test" in caplog.text

    def test_duplicate_relation_edges_collapse(self):
        res = resource(lexicon(
            synsets=[
                synset("syn-a", "n", "", relations=[
                    rel("syn-b", "hypernym"), rel("syn-b", "hypernym"),
                ]),
                synset("syn-b", "n", ""),
            ],
        ))
        index = build(res)
        assert len(index.synsets["syn-a"].relations) == 1
        assert index.synset_relations["syn-a"][SynsetRelationType.HYPERNYM] == ("syn-b",)

    def test_bad_pos_becomes_unknown(self):
        res = resource(lexicon(
            entries=[entry("w1", "one", "zz", [])],
        ))
        index, report = build_with_report(res)
        assert index.entries["w1"].lemma.pos is PartOfSpeech.UNKNOWN
        assert report.unknown_pos == 1

    def test_proposed_ili(self):
        syn = synset("syn-a", "n", "", ili="in")
        syn["ili_definition"] = {"text": "a new concept", "meta": None}
        index = build(resource(lexicon(synsets=[syn])))
        assert index.synsets["syn-a"].ili is None
        assert index.synsets["syn-a"].ili_definition.text == "a new concept"


class TestMalformedInput:
    def test_not_a_mapping(self):
        with pytest.raises(FormatError, match="must be a mapping"):
            build(["not", "a", "resource"])

    def test_missing_lexicons(self):
        with pytest.raises(FormatError, match="no 'lexicons' list"):
            build({"lmf_version": "1.3"})

    def test_entry_without_id(self):
        res = corpus.cat_dog()
        del res["lexicons"][0]["entries"][0]["id"]
        with pytest.raises(FormatError, match="LexicalEntry record without an id"):
            build(res)

    def test_entry_without_lemma(self):
        res = corpus.cat_dog()
        res["lexicons"][0]["entries"][0]["lemma"] = {}
        with pytest.raises(FormatError, match="no lemma written form"):
            build(res)

    def test_empty_resource(self):
        index = build({"lexicons": []})
        assert index.entry_ids == ()
