import json

from mjtranslate.core.parser import (
    parse_interactive,
    parse_phrase_analysis,
    parse_plain,
    parse_response,
    strip_code_fence,
)
from mjtranslate.models.translation import TranslateMode

ORIGINAL = "a beautiful sunset, photorealistic, cinematic"
SAMPLE = (
    '{"translated":"美丽的日落，逼真，电影感","keyPhrases":'
    '[{"en":"beautiful","zh":"美丽的","enStart":0,"enEnd":9,"zhStart":0,"zhEnd":3}]}'
)


def _phrase(en, zh, es, ee, zs, ze):
    return {"en": en, "zh": zh, "enStart": es, "enEnd": ee, "zhStart": zs, "zhEnd": ze}


def test_plain_trims_whitespace():
    parsed = parse_plain("  美丽的日落，电影感 \n")
    assert parsed.translated == "美丽的日落，电影感"
    assert parsed.key_phrases == []
    assert not parsed.degraded


def test_interactive_sample_response():
    parsed = parse_interactive(SAMPLE, ORIGINAL)
    assert parsed.translated == "美丽的日落，逼真，电影感"
    assert len(parsed.key_phrases) == 1
    phrase = parsed.key_phrases[0]
    assert phrase.id == 1
    assert phrase.sourceText == "beautiful"
    assert phrase.targetText == parsed.translated[0:3] == "美丽的"
    # 样例中的原文位置指向 "a beautif"，位置原样保留不做校正
    assert (phrase.sourceStart, phrase.sourceEnd) == (0, 9)
    assert not phrase.is_aligned(ORIGINAL, parsed.translated)


def test_interactive_aligned_offsets():
    payload = {"translated": "美丽的日落", "keyPhrases": [_phrase("beautiful", "美丽的", 2, 11, 0, 3)]}
    parsed = parse_interactive(json.dumps(payload, ensure_ascii=False), ORIGINAL)
    phrase = parsed.key_phrases[0]
    assert ORIGINAL[phrase.sourceStart:phrase.sourceEnd] == "beautiful"
    assert phrase.is_aligned(ORIGINAL, parsed.translated)


def test_interactive_ids_follow_list_order():
    payload = {
        "translated": "X",
        "keyPhrases": [_phrase("b", "乙", 5, 6, 1, 2), _phrase("a", "甲", 0, 1, 0, 1)],
    }
    parsed = parse_interactive(json.dumps(payload, ensure_ascii=False))
    assert [p.id for p in parsed.key_phrases] == [1, 2]
    assert [p.sourceText for p in parsed.key_phrases] == ["b", "a"]


def test_interactive_accepts_fenced_json():
    parsed = parse_interactive(f"```json\n{SAMPLE}\n```", ORIGINAL)
    assert not parsed.degraded
    assert parsed.translated == "美丽的日落，逼真，电影感"


def test_interactive_non_json_degrades_to_raw_text():
    parsed = parse_interactive("美丽的日落，逼真，电影感")
    assert parsed.degraded
    assert parsed.translated == "美丽的日落，逼真，电影感"
    assert parsed.key_phrases == []


def test_interactive_missing_fields_degrade():
    for raw in ('{"keyPhrases": []}', '{"translated": "X"}', '{"translated": "", "keyPhrases": []}', "[1, 2]"):
        parsed = parse_interactive(raw)
        assert parsed.degraded
        assert parsed.translated == raw
        assert parsed.key_phrases == []


def test_interactive_empty_phrase_list_is_not_degraded():
    parsed = parse_interactive('{"translated": "X", "keyPhrases": []}')
    assert not parsed.degraded
    assert parsed.key_phrases == []


def test_incomplete_phrase_is_skipped_but_ids_stay_positional():
    payload = {
        "translated": "X",
        "keyPhrases": [{"en": "a"}, "oops", _phrase("c", "丙", 0, 1, 0, 1)],
    }
    parsed = parse_interactive(json.dumps(payload))
    assert [p.id for p in parsed.key_phrases] == [3]


def test_inconsistent_offsets_pass_through():
    payload = {"translated": "X", "keyPhrases": [_phrase("sunset", "日落", 0, 3, 7, 9)]}
    parsed = parse_interactive(json.dumps(payload), ORIGINAL)
    phrase = parsed.key_phrases[0]
    assert (phrase.sourceStart, phrase.sourceEnd) == (0, 3)
    assert not phrase.is_aligned(ORIGINAL, parsed.translated)


def test_phrase_analysis_keeps_known_translation():
    raw = json.dumps({"keyPhrases": [_phrase("sunset", "日落", 12, 18, 3, 5)]}, ensure_ascii=False)
    parsed = parse_phrase_analysis(raw, ORIGINAL, "美丽的日落")
    assert parsed.translated == "美丽的日落"
    assert parsed.key_phrases[0].id == 1


def test_phrase_analysis_degrades_to_known_translation():
    parsed = parse_phrase_analysis("sorry, I cannot", ORIGINAL, "美丽的日落")
    assert parsed.degraded
    assert parsed.translated == "美丽的日落"
    assert parsed.key_phrases == []


def test_parse_response_dispatches_on_mode():
    assert parse_response(TranslateMode.PLAIN, SAMPLE).translated == SAMPLE
    assert parse_response(TranslateMode.INTERACTIVE, SAMPLE).key_phrases
    assert parse_response(TranslateMode.PHRASE_ANALYSIS, SAMPLE, translated="T").translated == "T"


def test_strip_code_fence_leaves_plain_text_alone():
    assert strip_code_fence(' {"a": 1} ') == '{"a": 1}'
    assert strip_code_fence('```\n{"a": 1}\n```') == '{"a": 1}'
