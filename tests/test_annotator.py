"""Annotator implementations and the noun predicate."""

from __future__ import annotations

import pytest

from df_summarizer.annotator import (
    NLTK_RESOURCES,
    NltkAnnotator,
    NounPredicate,
    TaggedTextAnnotator,
    ensure_nltk_data,
    Token,
    make_annotator,
    noun_predicate,
)
from df_summarizer.config import SummarizerConfig
from df_summarizer.errors import AnnotationError


def test_tagged_text_one_sentence_per_line():
    sentences = TaggedTextAnnotator().annotate("El/da gato/nc ./fp\n\n  Un/di perro/nc ./fp  \n")

    assert [s.index for s in sentences] == [0, 1]
    assert sentences[0].text == "El gato ."
    assert sentences[1].tokens == [Token("Un", "di"), Token("perro", "nc"), Token(".", "fp")]


def test_tagged_text_splits_on_last_separator():
    (sentence,) = TaggedTextAnnotator().annotate("1/2/Z")

    assert sentence.tokens == [Token("1/2", "Z")]


def test_tagged_text_custom_separator():
    (sentence,) = TaggedTextAnnotator(separator="_").annotate("dogs_NNS bark_VBP")

    assert sentence.tokens[0] == Token("dogs", "NNS")


def test_untagged_token_is_an_annotation_error():
    with pytest.raises(AnnotationError, match="nada"):
        TaggedTextAnnotator().annotate("gato/nc nada")


@pytest.mark.parametrize(
    "tag,expected",
    [("nc0s000", True), ("np00000", True), ("NN", True), ("NNPS", True), ("vmip3s0", False), ("", False)],
)
def test_noun_predicate_ignores_case_by_default(tag, expected):
    assert NounPredicate()(tag) is expected


def test_noun_predicate_case_sensitive():
    is_noun = NounPredicate(prefix="n", ignore_case=False)

    assert is_noun("nc")
    assert not is_noun("NN")


def test_factories_follow_config():
    cfg = SummarizerConfig(annotator="tagged", tag_separator="|", noun_tag_prefix="NN", ignore_tag_case=False)

    ann = make_annotator(cfg)

    assert isinstance(ann, TaggedTextAnnotator)
    assert ann.separator == "|"
    assert noun_predicate(cfg) == NounPredicate(prefix="NN", ignore_case=False)
    assert isinstance(make_annotator(SummarizerConfig()), NltkAnnotator)


def test_unknown_annotator():
    with pytest.raises(ValueError):
        make_annotator(SummarizerConfig(annotator="corenlp"))


def test_nltk_annotator_tags_nouns():
    # fetches punkt_tab and the perceptron tagger on first use
    sentences = NltkAnnotator().annotate("The cat sleeps. A dog barks at the cat.")

    assert [s.index for s in sentences] == [0, 1]
    assert sentences[0].text == "The cat sleeps."
    assert sentences[1].text == "A dog barks at the cat."
    nouns = [t.text for s in sentences for t in s.tokens if NounPredicate()(t.tag)]
    assert nouns.count("cat") == 2
    assert "dog" in nouns
    assert all(t.tag.startswith("NN") for s in sentences for t in s.tokens if t.text == "cat")


def test_missing_nltk_data_names_the_resources(monkeypatch):
    import nltk

    def not_found(path, *args, **kwargs):
        raise LookupError(path)

    monkeypatch.setattr(nltk.data, "find", not_found)

    with pytest.raises(AnnotationError) as exc_info:
        ensure_nltk_data(download=False)

    message = str(exc_info.value)
    assert "punkt_tab" in message
    assert "averaged_perceptron_tagger_eng" in message
    assert all(name in message for name in NLTK_RESOURCES)


def test_nltk_annotator_is_built_ready(monkeypatch):
    calls = []
    monkeypatch.setattr("df_summarizer.annotator.ensure_nltk_data", lambda download=True: calls.append(download))

    ann = NltkAnnotator(language="spanish", download=False)

    assert ann.language == "spanish"
    assert calls == [False]
