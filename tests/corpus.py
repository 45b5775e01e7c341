"""Builders for WN-LMF resource mappings in the shape ``wn.lmf.load`` returns."""


def rel(target, rel_type):
    return {"target": target, "relType": rel_type, "meta": None}


def sense(sense_id, synset, relations=()):
    return {
        "id": sense_id,
        "synset": synset,
        "relations": list(relations),
        "examples": [],
        "counts": [],
        "meta": None,
    }


def entry(entry_id, form, pos, senses=(), pronunciations=()):
    return {
        "id": entry_id,
        "lemma": {
            "writtenForm": form,
            "partOfSpeech": pos,
            "pronunciations": list(pronunciations),
            "tags": [],
        },
        "forms": [],
        "senses": list(senses),
        "meta": None,
    }


def synset(synset_id, pos, members, definition=None, relations=(),
           examples=(), ili=""):
    return {
        "id": synset_id,
        "ili": ili,
        "partOfSpeech": pos,
        "members": members,
        "definitions": [{"text": definition, "meta": None}] if definition else [],
        "relations": list(relations),
        "examples": [{"text": x, "meta": None} for x in examples],
        "lexicalized": True,
        "meta": None,
    }


def lexicon(entries=(), synsets=(), lex_id="test", meta=None):
    return {
        "id": lex_id,
        "label": "Test Lexicon",
        "language": "en",
        "email": "test@test.com",
        "license": "https://opensource.org/licenses/MIT",
        "version": "1.0",
        "url": "",
        "citation": "",
        "meta": meta,
        "entries": list(entries),
        "synsets": list(synsets),
        "requires": [],
        "frames": [],
    }


def resource(*lexicons):
    return {"lmf_version": "1.3", "lexicons": list(lexicons)}


def cat_dog():
    """Two nouns, each in its own synset, no relations."""
    return resource(lexicon(
        entries=[
            entry("w-cat", "cat", "n", [sense("s-cat-1", "syn1")]),
            entry("w-dog", "dog", "n", [sense("s-dog-1", "syn2")]),
        ],
        synsets=[
            synset("syn1", "n", "w-cat",
                   definition="a small domesticated carnivorous mammal"),
            synset("syn2", "n", "w-dog", definition="a domesticated canid"),
        ],
    ))


def sample():
    """A small corpus exercising synonyms, taxonomy, antonyms and POS."""
    return resource(lexicon(
        meta={"publisher": "Test Publisher", "status": "draft",
              "confidenceScore": "0.9"},
        entries=[
            entry("w-cat", "cat", "n", [sense("s-cat-1", "syn1")],
                  pronunciations=[{"text": "kæt", "variety": "GB",
                                   "notation": "", "phonemic": True,
                                   "audio": ""}]),
            entry("w-kitty", "Kitty", "n", [sense("s-kitty-1", "syn1")]),
            entry("w-dog", "dog", "n", [sense("s-dog-1", "syn2")]),
            entry("w-animal", "animal", "n", [sense("s-animal-1", "syn3")]),
            entry("w-hot", "hot", "a", [
                sense("s-hot-1", "syn4", [rel("s-cold-1", "antonym")]),
            ]),
            entry("w-warm", "warm", "a", [
                sense("s-warm-1", "syn4", [rel("s-cool-1", "antonym")]),
            ]),
            entry("w-cold", "cold", "a", [
                sense("s-cold-1", "syn5", [rel("s-hot-1", "antonym")]),
            ]),
            entry("w-cool", "cool", "a", [sense("s-cool-1", "syn5")]),
            entry("w-run-n", "run", "n", [sense("s-run-n-1", "syn7")]),
            entry("w-run-v", "run", "v", [
                sense("s-run-v-1", "syn8", [
                    rel("s-run-n-1", "derivation"),
                    rel("s-run-n-1", "fancy_new_relation"),
                ]),
            ]),
        ],
        synsets=[
            synset("syn1", "n", "w-cat w-kitty",
                   definition="a small domesticated carnivorous mammal",
                   relations=[rel("syn3", "hypernym")],
                   examples=["the cat sat on the mat"], ili="i1"),
            synset("syn2", "n", "w-dog", definition="a domesticated canid",
                   relations=[rel("syn3", "hypernym")]),
            synset("syn3", "n", "w-animal", definition="a living organism",
                   relations=[rel("syn1", "hyponym"), rel("syn2", "hyponym")]),
            synset("syn4", "a", "w-hot w-warm", definition="of high temperature",
                   relations=[rel("syn5", "similar")]),
            synset("syn5", "a", "w-cold w-cool", definition="of low temperature"),
            synset("syn7", "n", "w-run-n", definition="a race"),
            synset("syn8", "v", "w-run-v", definition="move fast",
                   relations=[rel("syn7", "something_else")]),
        ],
    ))
