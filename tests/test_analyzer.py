import pytest

from services.analyzer import (
    analyze,
    extract_characters,
    extract_events,
    extract_items,
    extract_places,
    score_importance,
    MAX_EVENTS,
)

@pytest.mark.parametrize("text", [None, "", b'"Hi," said Mary.', 42, ["John walked"]])
def test_empty_input_yields_empty_result(text):
    result = analyze(text)
    assert result.characters == []
    assert result.places == []
    assert result.events == []
    assert result.items == []

def test_dialogue_creates_character():
    characters = extract_characters('"Hello there," said Mary.')
    assert [c.name for c in characters] == ["Mary"]
    assert characters[0].dialogues == ["Hello there,"]
    assert characters[0].actions == []

def test_repeated_actions_qualify_character():
    characters = extract_characters("John walked to the door. John walked to the window. John walked away.")
    assert [c.name for c in characters] == ["John"]
    assert characters[0].actions == ["John walked", "John walked", "John walked"]
    assert characters[0].dialogues == []

def test_single_action_is_not_enough():
    assert extract_characters("Peter opened the door.") == []

def test_dialogue_match_restarts_after_failed_quote():
    """The narration between two quotes is never read as a quotation"""
    characters = extract_characters('"Run," he said. "Hide," whispered Anna.')
    assert [c.name for c in characters] == ["Anna"]
    assert characters[0].dialogues == ["Hide,"]

def test_multi_word_names():
    text = '"Run," said Tom Smith. "Go," said Anna Maria Louisa Smith.'
    characters = extract_characters(text)
    # Four capitalized words are more likely a title than a name
    assert [c.name for c in characters] == ["Tom Smith"]

def test_dialogue_and_actions_merge_by_name():
    text = '"Wait," said Mary. Mary turned around.'
    characters = extract_characters(text)
    assert len(characters) == 1
    assert characters[0].dialogues == ["Wait,"]
    assert characters[0].actions == ["Mary turned"]

def test_places_keep_first_match_and_its_context():
    text = "They arrived at the Silver Gate. The Silver Gate stood open."
    places = extract_places(text)
    assert [p.name for p in places] == ["Silver Gate"]
    assert "arrived at the Silver Gate" in places[0].context

def test_places_from_each_pattern():
    text = "She waited in the Dark Forest. Later she entered Rivertown. The Citadel stood on the hill."
    names = [p.name for p in extract_places(text)]
    assert names == ["Dark Forest", "Rivertown", "Citadel"]

def test_place_context_window():
    padding = "x" * 80
    text = f"{padding} in the Dark Forest {padding}"
    place = extract_places(text)[0]
    start = text.index("in the Dark Forest")
    end = start + len("in the Dark Forest")
    assert place.context == text[start - 50:end + 50]

def test_short_place_names_are_ignored():
    assert extract_places("He slept at the Inn.") == []

def test_item_near_sensory_verb():
    items = extract_items("The ancient sword glowed faintly.")
    assert items[0].name == "ancient sword"
    assert "glowed" in items[0].context
    assert all(item.name == item.name.lower() for item in items)
    assert any("sword" in item.name for item in items)

def test_items_are_lowercased_and_deduplicated():
    items = extract_items("She picked up the Silver Key. The silver key glowed.")
    assert [item.name for item in items] == ["silver key"]
    assert "picked up" in items[0].context

def test_score_importance_counts_all_bonuses():
    assert score_importance("Mary died in the storm!") == 4
    assert score_importance("the king was born and later married") == 4
    assert score_importance("nothing happened here") == 0

def test_event_requires_more_than_five_words():
    assert extract_events("Suddenly Mary saw it.") == []
    events = extract_events("Suddenly Mary saw the dragon above the hills.")
    assert [e.text for e in events] == ["Suddenly Mary saw the dragon above the hills"]
    assert events[0].importance == 1

def test_event_requires_capitalized_word():
    assert extract_events("then the rain fell on the quiet town.") == []

NAMES = ["Alice", "Bruno", "Clara", "Dmitri", "Elena", "Felix", "Greta", "Hugo", "Ivy", "Jonas", "Karl", "Lena"]

def test_events_keep_top_ten_by_importance():
    sentences = []
    for index, name in enumerate(NAMES):
        if index % 3 == 0:
            sentences.append(f"Then {name} discovered the hidden door at night.")
        else:
            sentences.append(f"Then {name} crossed the long bridge at night.")
    events = extract_events(" ".join(sentences))

    assert len(events) == MAX_EVENTS
    scores = [event.importance for event in events]
    assert scores == sorted(scores, reverse=True)
    assert scores[:4] == [3, 3, 3, 3]
    # Equal scores stay in reading order
    assert [e.text.split()[1] for e in events[:4]] == ["Alice", "Dmitri", "Greta", "Jonas"]
    assert [e.text.split()[1] for e in events[4:]] == ["Bruno", "Clara", "Elena", "Felix", "Hugo", "Ivy"]

def test_analyze_is_deterministic():
    text = (
        '"Hello there," said Mary. John walked to the door. John walked to the window. '
        "They arrived at the Silver Gate. The ancient sword glowed faintly."
    )
    assert analyze(text).to_dict() == analyze(text).to_dict()

def test_to_dict_shape():
    result = analyze('"Hello there," said Mary. They arrived at the Silver Gate.').to_dict()
    assert set(result) == {"characters", "places", "events", "items"}
    assert result["characters"][0] == {"name": "Mary", "dialogues": ["Hello there,"], "actions": []}
    assert result["places"][0]["name"] == "Silver Gate"

def test_byte_order_mark_separates_words():
    places = extract_places("The Castle\ufeffwas old.")
    assert [p.name for p in places] == ["Castle"]

def test_information_separators_are_not_whitespace():
    assert extract_characters('"Hi,"\x1csaid Mary.') == []
    assert extract_characters('"Hi,"\x85said Mary.') == []
    assert [c.name for c in extract_characters('"Hi,"\u00a0said Mary.')] == ["Mary"]

def test_keywords_fold_ascii_case_only():
    assert extract_events("\u017fuddenly Mary went home to the farm.") == []
    assert len(extract_events("SUDDENLY Mary went home to the farm.")) == 1
    assert extract_items("She pic\u212aed up a lantern.") == []
    assert [i.name for i in extract_items("She PICKED UP a lantern.")] == ["lantern"]

def test_event_text_is_trimmed_of_script_whitespace_only():
    events = extract_events("\ufeffSuddenly Mary went home to the farm. \x1cThen Mary went back to the farm.")
    assert [e.text for e in events] == [
        "Suddenly Mary went home to the farm",
        "\x1cThen Mary went back to the farm",
    ]
